"""CSV writer for generated table batches."""

from pathlib import Path
from typing import Dict, Iterable
import pandas as pd
from seedgraph.generation.errors import PersistenceError
from seedgraph.generation.error_logging import log_error
from seedgraph.config.logging import get_logger
from .pool import TableBatch

logger = get_logger(__name__)


def batch_to_frame(batch: TableBatch) -> pd.DataFrame:
    """DataFrame for a batch, columns in batch order."""
    return pd.DataFrame.from_records(batch.rows, columns=batch.columns)


def write_batches(batches: Iterable[TableBatch], out_dir: Path) -> Dict[str, Path]:
    """
    Write one CSV file per batch, in the order given.

    Args:
        batches: Table batches (dependency order)
        out_dir: Output directory, created if missing

    Returns:
        Mapping of table name -> written file path

    Raises:
        PersistenceError: If a file cannot be written
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}

    for batch in batches:
        path = out_dir / f"{batch.table_name}.csv"
        df = batch_to_frame(batch)
        try:
            df.to_csv(path, index=False)
        except OSError as e:
            log_error(
                error=e,
                context={"rows": len(df), "columns": len(df.columns), "file_path": str(path)},
                operation="writing CSV",
                entity=batch.table_name,
            )
            raise PersistenceError(f"couldn't write {path}: {e}", cause=e) from e
        logger.info(f"Wrote {len(df)} rows to {path}")
        written[batch.table_name] = path

    return written
