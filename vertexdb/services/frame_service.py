# Third-party
import polars as pl

# Local imports
from vertexdb.core.errors import InvalidInputError
from vertexdb.core.models import Row, TableProfile
from vertexdb.core.utils import compute_stats, rows_to_frame

# -----------------------------
# Frame Service
# -----------------------------


class FrameService:
    """Conversion between table rows and Polars DataFrames."""

    def to_frame(self, rows: list[Row]) -> pl.DataFrame:
        """Build a DataFrame from rows.

        Args:
            rows: Rows to convert; columns are the union of all row keys

        Returns:
            Polars DataFrame with one row per table row
        """
        return rows_to_frame(rows)

    def from_frame(self, frame: pl.DataFrame) -> list[Row]:
        """Turn a DataFrame into rows.

        Raises:
            InvalidInputError: If ``frame`` is not a Polars DataFrame
        """
        if not isinstance(frame, pl.DataFrame):
            msg = f"Expected a polars DataFrame, got {type(frame).__name__}"
            raise InvalidInputError(msg)
        return frame.to_dicts()

    def profile(self, rows: list[Row]) -> TableProfile:
        """Column statistics (dtype, nulls, unique count) for rows."""
        return compute_stats(self.to_frame(rows))
