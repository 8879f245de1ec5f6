"""Helper functions for reading and writing table files to reduce boilerplate."""

import atexit
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

import pandas as pd

from ..logger import WranglerLogger
from ..params import STR_COLUMNS


class FileReadError(Exception):
    """Raised when there is an error reading a file."""


def write_table(
    df: pd.DataFrame,
    filename: Path,
    overwrite: bool = False,
    **kwargs,
) -> None:
    """Write a dataframe to a file.

    Args:
        df (pd.DataFrame): dataframe to write.
        filename (Path): filename to write to.
        overwrite (bool): whether to overwrite the file if it exists. Defaults to False.
        kwargs: additional arguments to pass to the writer.
    """
    filename = Path(filename)
    if filename.exists() and not overwrite:
        msg = f"File {filename} already exists and overwrite is False."
        raise FileExistsError(msg)

    if not filename.parent.exists():
        filename.parent.mkdir(parents=True)

    WranglerLogger.debug(f"Writing {len(df)} records to {filename}.")

    if "csv" in filename.suffix or "txt" in filename.suffix:
        df.to_csv(filename, index=False, **kwargs)
    elif "json" in filename.suffix:
        with filename.open("w") as f:
            f.write(df.to_json(orient="records"))
    else:
        msg = f"Filetype {filename.suffix} not implemented."
        raise NotImplementedError(msg)


def write_tables_to_zip(tables: dict[str, pd.DataFrame], zip_path: Path, overwrite: bool = False):
    """Write a mapping of `<filename>: <dataframe>` as csv members of a single zip archive."""
    zip_path = Path(zip_path)
    if zip_path.exists() and not overwrite:
        msg = f"File {zip_path} already exists and overwrite is False."
        raise FileExistsError(msg)
    zip_path.parent.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for filename, df in tables.items():
            WranglerLogger.debug(f"Adding {filename} with {len(df)} records to {zip_path}.")
            zf.writestr(filename, df.to_csv(index=False))


def read_table(filename: Path, str_columns: Optional[list[str]] = None) -> pd.DataFrame:
    """Read a csv-formatted table, keeping id and time columns as strings.

    Args:
        filename: path to a `.txt` or `.csv` file.
        str_columns: columns to read as strings. Defaults to `STR_COLUMNS`.
    """
    filename = Path(filename)
    str_columns = STR_COLUMNS if str_columns is None else str_columns
    if filename.suffix not in [".csv", ".txt"]:
        msg = f"Filetype {filename.suffix} not implemented."
        raise NotImplementedError(msg)
    WranglerLogger.debug(f"...reading {filename}.")
    try:
        df = pd.read_csv(
            filename,
            dtype={c: str for c in str_columns},
            skipinitialspace=True,
            encoding="utf-8-sig",
        )
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        msg = f"Error reading table from file: {filename}.\n{e}"
        WranglerLogger.error(msg)
        raise FileReadError(msg) from e
    except pd.errors.EmptyDataError:
        WranglerLogger.warning(f"{filename} is empty. Using an empty table.")
        return pd.DataFrame()
    df.columns = [c.strip() for c in df.columns]
    return df


def unzip_file(path: Path) -> Path:
    """Unzips a file to a temporary directory and returns the directory path.

    The temporary directory is removed when the interpreter exits.
    """
    tmpdir = tempfile.mkdtemp()
    shutil.unpack_archive(path, tmpdir)
    atexit.register(shutil.rmtree, tmpdir, ignore_errors=True)
    return Path(tmpdir)


def prep_dir(outdir: Path, overwrite: bool = True):
    """Prepare a directory for writing files."""
    outdir = Path(outdir)
    if not overwrite and outdir.exists() and len(list(outdir.iterdir())) > 0:
        msg = f"Directory {outdir} is not empty and overwrite is False."
        raise FileExistsError(msg)
    outdir.mkdir(parents=True, exist_ok=True)
