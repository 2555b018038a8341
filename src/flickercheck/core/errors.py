from __future__ import annotations

ERROR_CODE_AMBIGUOUS_COMPONENT = "AMBIGUOUS_COMPONENT"
ERROR_CODE_NO_COMPONENT = "NO_COMPONENT"
ERROR_CODE_MALFORMED_COMPONENT_NAME = "MALFORMED_COMPONENT_NAME"
ERROR_CODE_MISSING_ASSOCIATED_TRANSITION = "MISSING_ASSOCIATED_TRANSITION"
ERROR_CODE_RULE_EXECUTION_ERROR = "RULE_EXECUTION_ERROR"


class ComponentResolutionError(Exception):
    """A component reference could not be turned into a matcher for one rule."""

    code = "COMPONENT_RESOLUTION_FAILED"


class AmbiguousComponentError(ComponentResolutionError):
    code = ERROR_CODE_AMBIGUOUS_COMPONENT


class NoComponentError(ComponentResolutionError):
    code = ERROR_CODE_NO_COMPONENT


class MalformedComponentNameError(ComponentResolutionError):
    code = ERROR_CODE_MALFORMED_COMPONENT_NAME


class MissingAssociatedTransitionError(ComponentResolutionError):
    code = ERROR_CODE_MISSING_ASSOCIATED_TRANSITION


class AnalysisInputError(ValueError):
    pass


class RuleConfigurationError(ValueError):
    pass


class UnknownComponentError(RuleConfigurationError):
    pass


class TraceValidationError(ValueError):
    pass


def error_code_for(exc: BaseException) -> str:
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code:
        return code
    return ERROR_CODE_RULE_EXECUTION_ERROR


__all__ = [
    "ERROR_CODE_AMBIGUOUS_COMPONENT",
    "ERROR_CODE_MALFORMED_COMPONENT_NAME",
    "ERROR_CODE_MISSING_ASSOCIATED_TRANSITION",
    "ERROR_CODE_NO_COMPONENT",
    "ERROR_CODE_RULE_EXECUTION_ERROR",
    "AmbiguousComponentError",
    "AnalysisInputError",
    "ComponentResolutionError",
    "MalformedComponentNameError",
    "MissingAssociatedTransitionError",
    "NoComponentError",
    "RuleConfigurationError",
    "TraceValidationError",
    "UnknownComponentError",
    "error_code_for",
]
