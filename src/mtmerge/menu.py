"""
Interactive menu mode - picks the destination, source, and mapping CSV
files from a directory and the gradebook column to fill, then merges.
"""

from pathlib import Path

from .common import MergeError, header_of, read_table
from .join import merge_files


class StdinChooser:
    """Present a numbered menu and read the selection from standard input."""

    def __init__(self, read=None, write=None):
        self.read = read or input
        self.write = write or print

    def choose(self, prompt, options):
        """
        Ask the user to pick one of the options.

        Re-prompts until the answer is a number between 1 and len(options).

        Returns:
            0-based index of the chosen option
        """
        self.write(f"\n{prompt}")
        for number, option in enumerate(options, start=1):
            self.write(f"   {number}. {option}")

        while True:
            answer = self.read('> ').strip()
            try:
                choice = int(answer)
            except ValueError:
                self.write(f"   Please enter a number from 1 to {len(options)}")
                continue
            if 1 <= choice <= len(options):
                return choice - 1
            self.write(f"   Please enter a number from 1 to {len(options)}")


def list_csv_files(directory):
    """Return the .csv files in a directory, sorted by name."""
    return sorted(p for p in Path(directory).glob('*.csv') if p.is_file())


def updated_filename(dest_file):
    """canvas.csv -> canvas-updated.csv, in the same directory."""
    dest_file = Path(dest_file)
    return dest_file.with_name(f"{dest_file.stem}-updated.csv")


def choose_files(csv_files, chooser):
    """
    Pick the destination, source, and mapping files in that order.

    A file that has already been picked is not offered again.

    Returns:
        Tuple of (dest_file, source_file, mapping_file)
    """
    prompts = [
        'Choose the DESTINATION CSV file (exported gradebook)',
        'Choose the SOURCE CSV file (scores)',
        'Choose the MAPPING CSV file (GitHub ID to SIS Login ID)',
    ]
    remaining = list(csv_files)
    chosen = []
    for prompt in prompts:
        idx = chooser.choose(prompt, [p.name for p in remaining])
        chosen.append(remaining.pop(idx))
    return tuple(chosen)


def run_menu(directory='.', chooser=None, fragments=None, verbose=True):
    """
    Run the interactive menu workflow.

    Args:
        directory: Directory scanned for CSV files
        chooser: Object with a choose(prompt, options) method; defaults to
            StdinChooser
        fragments: Column fragment mapping for the key and source columns
        verbose: Print detailed progress information

    Returns:
        MergeResult
    """
    chooser = chooser or StdinChooser()

    csv_files = list_csv_files(directory)
    if len(csv_files) < 3:
        raise MergeError(
            f"Need at least 3 CSV files in {Path(directory).resolve()}, "
            f"found {len(csv_files)}"
        )

    dest_file, source_file, mapping_file = choose_files(csv_files, chooser)

    dest_header = header_of(read_table(dest_file))
    dest_column = chooser.choose(
        f"Choose the column to fill in {dest_file.name}", dest_header
    )

    output_file = updated_filename(dest_file)

    if verbose:
        print(f"\nMerging {source_file.name} into {dest_file.name} "
              f"via {mapping_file.name}")

    return merge_files(
        dest_file, source_file, mapping_file, output_file,
        fragments=fragments,
        dest_column=dest_column,
        verbose=verbose,
    )
