import csv
import logging
import os

from ..symbolic_regression.ode_simulation import Dataset
from ..types import ValidationError

logger = logging.getLogger(__name__)


def load_csv_dataset(
    filepath: str, time_column: str = "t", position_column: str = "x"
) -> Dataset:
    """
    Load a trajectory from a CSV file with a header row.

    Args:
        filepath: Path to the CSV file.
        time_column: Header of the column holding sample times.
        position_column: Header of the column holding positions.

    Returns:
        Dataset built from the two columns, in file order.

    Raises:
        ValidationError: If the file or a column is missing, a value is not
            numeric, or the samples do not form a valid Dataset.
    """
    if not os.path.exists(filepath):
        raise ValidationError(f"File not found: {filepath}")

    with open(filepath, "r", newline="") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise ValidationError("CSV file is empty or missing header")

        # Header names are compared with surrounding whitespace removed
        columns = {name.strip(): name for name in reader.fieldnames if name}
        for wanted in (time_column, position_column):
            if wanted not in columns:
                raise ValidationError(
                    f"Column {wanted!r} not found in {filepath} "
                    f"(available: {', '.join(columns)})"
                )

        times = []
        positions = []
        for line_no, row in enumerate(reader, start=2):
            try:
                times.append(float(row[columns[time_column]]))
                positions.append(float(row[columns[position_column]]))
            except (ValueError, TypeError):
                raise ValidationError(
                    f"Non-numeric value on line {line_no} of {filepath}"
                ) from None

    logger.info("Loaded %d rows from '%s'", len(times), filepath)
    return Dataset(times, positions)
