from app.economy.points.service import PointsService

__all__ = ["PointsService"]
