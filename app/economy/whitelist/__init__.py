from app.economy.whitelist.service import WhitelistResult, WhitelistService

__all__ = ["WhitelistResult", "WhitelistService"]
