from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class RpcConnectionError(DomainError):
    """RPC endpoint unreachable or serving the wrong chain."""


class ContractCallError(DomainError):
    """A contract read call failed or returned undecodable data."""


class PairNotFoundError(DomainError):
    """Pair is not in the monitored set."""


class ChartNotAvailableError(DomainError):
    """No chart is currently loaded."""


class ChartRenderError(DomainError):
    """Chart view could not be built from the series."""


class InvalidTimeframeError(DomainError):
    """Timeframe is not supported."""
