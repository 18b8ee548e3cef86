# Third-party
from rich.console import Console
from rich.table import Table

# Local imports
from vertexdb.core.models import Row, StoreStats
from vertexdb.core.utils import to_text

# -----------------------------
# Display Service
# -----------------------------


class DisplayService:
    """Service for Rich console rendering of tables and stats."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_rows(self, table_name: str, rows: list[Row]) -> None:
        """Display rows in a rich table.

        Args:
            table_name: Title of the table
            rows: Rows to render; columns are the union of all row keys
        """
        columns: list[str] = []
        for row in rows:
            columns.extend(key for key in row if key not in columns)

        table: Table = Table(
            title=f"{table_name} ({len(rows)} rows)",
            show_header=True,
            header_style="bold magenta",
        )
        for column in columns:
            table.add_column(column, style="cyan" if column == "id" else "white")

        for row in rows:
            table.add_row(*(to_text(row[c]) if c in row else "-" for c in columns))

        self.console.print(table)

    def show_stats(self, stats: StoreStats) -> None:
        """Display store statistics."""
        table: Table = Table(
            title="Tables", show_header=True, header_style="bold magenta"
        )
        table.add_column("Name", style="cyan")
        table.add_column("Rows", justify="right", style="white")
        table.add_column("Cols", justify="right", style="white")

        for name, table_stats in stats["tables"].items():
            table.add_row(
                name, f"{table_stats['count']:,}", str(table_stats["columns"])
            )

        self.console.print(table)
        self.console.print(f"[bold cyan]Total records:[/] {stats['total_records']:,}")
        if stats["indexes"]:
            self.console.print(f"[bold cyan]Indexes:[/] {', '.join(stats['indexes'])}")
