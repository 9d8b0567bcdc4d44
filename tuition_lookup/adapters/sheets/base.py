from abc import ABC, abstractmethod


class AbstractGridSource(ABC):
    """Read-only source of a 2-D grid of string cells."""

    @property
    @abstractmethod
    def cache_key(self) -> str:
        """Stable identifier of the grid this source returns."""
        ...

    @abstractmethod
    async def fetch_grid(self) -> list[list[str]]:
        """Fetch the whole grid, header row first.

        Returns:
            list[list[str]]: Rows of cells; rows may have different lengths.

        Raises:
            UpstreamUnavailableError: If the source cannot be read.
        """
        ...
