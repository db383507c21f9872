class LotteryError(ValueError): ...


class ValidationError(LotteryError): ...


class AuthorizationError(LotteryError): ...


class InsufficientResourceError(LotteryError): ...


class StateConflictError(LotteryError): ...


class LengthMismatch(ValidationError): ...


class DuplicateThreshold(ValidationError): ...


class NegativeOdds(ValidationError): ...


class NegativePayout(ValidationError): ...


class OddsExceedHundredPercent(ValidationError): ...


class InvalidDenominator(ValidationError): ...


class InvalidRatio(ValidationError): ...


class ZeroCards(ValidationError): ...


class ZeroAmount(ValidationError): ...


class Unauthorized(AuthorizationError): ...


class NotOwner(AuthorizationError): ...


class InsufficientFunds(InsufficientResourceError): ...


class InsufficientTreasuryBalance(InsufficientResourceError): ...


class AlreadyScratched(StateConflictError): ...


class MissingConversionRate(StateConflictError): ...


class MismatchedAssets(StateConflictError): ...


class CardNotFound(LotteryError): ...
