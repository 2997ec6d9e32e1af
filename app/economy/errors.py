class LedgerEngineError(Exception):
    pass


class ValidationError(LedgerEngineError):
    pass


class ConflictError(LedgerEngineError):
    pass


class NotFoundError(LedgerEngineError):
    pass


class UpstreamUnavailableError(LedgerEngineError):
    pass


class SelfReferralNotAllowedError(ValidationError):
    pass


class MalformedQuestTargetError(ValidationError):
    pass


class UnsupportedPlatformError(ValidationError):
    pass


class UnsupportedActionError(ValidationError):
    pass


class InvalidExternalIdError(ValidationError):
    pass


class QuestExpiredError(ValidationError):
    pass


class ReferralAlreadyUsedError(ConflictError):
    pass


class QuestAlreadyCompletedError(ConflictError):
    pass


class QuestNotFoundError(NotFoundError):
    pass


class UnknownReferralCodeError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class StoreUnavailableError(UpstreamUnavailableError):
    pass


class CheckerUnavailableError(UpstreamUnavailableError):
    pass


class QuestNotCompletedError(LedgerEngineError):
    """The quest predicate evaluated to false; retrying will not change the answer."""
