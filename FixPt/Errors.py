class AnalysisException(Exception):
    """Raised when an analysis is handed a malformed program or an unknown
    configuration. Conditions the analyses can absorb (unresolvable calls,
    duplicate edges) never raise."""
    pass
