import argparse
import csv
import glob
import shutil
from pathlib import Path
from typing import List, NamedTuple, Optional

import yaml
from prettytable import PrettyTable

from canonical_xml.canonical import canonicalize
from canonical_xml.config import load_options
from canonical_xml.errors import CanonicalizationError
from canonical_xml.profile_logger import ProfileLogger
from canonical_xml.tokenize_xml import XMLTokenizer
from canonical_xml.types import CanonicalResult, Options, Tokenizer

from .utils import load_tokenizer


class LogResult(NamedTuple):
    input_file: str
    output_file: str
    id: str
    size: int
    status: str


class SimpleLogger:
    def __init__(self, filename: Path) -> None:
        self.file = filename.open("w")
        self._results: List[LogResult] = []

    def log(self, *message: str) -> None:
        joined = " ".join(str(m) for m in message)
        self.file.write(joined + "\n")
        self.file.flush()
        print(joined)

    def log_result(self, row: LogResult) -> None:
        self._results.append(row)

    def close(self) -> None:
        self.file.close()


class Config(NamedTuple):
    input_files: List[Path]
    outdir: Path
    options: Options
    tokenizer: Tokenizer
    logger: SimpleLogger
    prof_logger: ProfileLogger
    halt_on_error: bool


def output_path_for(input_file: Path, outdir: Path) -> Path:
    return outdir / f"{input_file.stem}.c14n.xml"


def write_report(input_file: Path, result: CanonicalResult, config: Config) -> None:
    report = config.outdir / f"{input_file.stem}.report.yml"
    report.write_text(
        yaml.dump(
            {
                "input_file": str(input_file.absolute()),
                "id": result.id,
                "size": len(result.data),
                "options": dict(config.options._asdict()),
            }
        )
    )


def process_file(input_file: Path, config: Config) -> LogResult:
    result = canonicalize(
        input_file.read_bytes(),
        config.options,
        config.logger,
        config.prof_logger,
        config.tokenizer,
    )
    output_file = output_path_for(input_file, config.outdir)
    output_file.write_bytes(result.data)
    write_report(input_file, result, config)
    return LogResult(str(input_file), str(output_file), result.id, len(result.data), "ok")


def process_file_safe(input_file: Path, config: Config) -> LogResult:
    try:
        return process_file(input_file, config)
    except (CanonicalizationError, OSError) as e:
        if config.halt_on_error:
            raise e
        config.logger.log(f"    Error: {e} for {input_file}")
        return LogResult(str(input_file), "", "", 0, f"error: {type(e).__name__}")


def generate_results(config: Config) -> int:
    failures = 0
    for input_file in config.input_files:
        row = process_file_safe(input_file, config)
        if row.status != "ok":
            failures += 1
        else:
            config.logger.log(f"    {input_file}: id={row.id!r} ({row.size} bytes)")
        config.logger.log_result(row)

    results = config.logger._results
    if results:
        table = PrettyTable()
        table.field_names = ["Input File", "Identifier", "Size", "Status"]
        for row in results:
            table.add_row([row.input_file, row.id, row.size, row.status])
        config.logger.log(str(table))

        with open(config.outdir / "results.csv", "w", newline="") as results_file:
            csv_writer = csv.DictWriter(results_file, LogResult._fields)
            csv_writer.writeheader()
            csv_writer.writerows(r._asdict() for r in results)

    config.logger.log(
        f"Marshal: {config.prof_logger.total('marshal'):.6f}s, "
        f"rewrite: {config.prof_logger.total('rewrite'):.6f}s"
    )
    config.prof_logger.write(config.outdir / "time_logs.txt")
    return failures


class ArgumentParseError(Exception):
    pass


def parse_args(argv: Optional[List[str]] = None) -> Config:
    parser = argparse.ArgumentParser(
        description="Write canonical XML for signing and report document identifiers."
    )
    parser.add_argument(
        "--inputs",
        type=str,
        required=True,
        help="Glob pattern for the XML files to canonicalize.",
    )
    parser.add_argument(
        "--outdir", type=Path, default="./out", help="Path to the output directory."
    )
    parser.add_argument(
        "--replace", action="store_true", help="Replace existing output."
    )
    parser.add_argument("--config", type=Path, help="YAML file with options.")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Treat parse errors as the end of the document instead of failing.",
    )
    parser.add_argument(
        "--legacy-prefixes",
        action="store_true",
        help="Write an empty prefix for attribute namespaces not declared on the element.",
    )
    parser.add_argument(
        "--tokenizer",
        type=str,
        default="xml",
        help="Use 'xml' or a script containing a Tokenizer class.",
    )
    parser.add_argument("--halt-on-error", action="store_true", help="Halt on error.")

    args = parser.parse_args(argv)

    options = Options()
    if args.config:
        if not args.config.exists():
            raise ArgumentParseError(f"Config file not found: {args.config}")
        try:
            options = load_options(args.config)
        except CanonicalizationError as e:
            raise ArgumentParseError(str(e)) from e
    if args.lenient:
        options = options._replace(lenient_stream=True)
    if args.legacy_prefixes:
        options = options._replace(strict_prefixes=False)

    if args.tokenizer == "xml" or not args.tokenizer:
        tokenizer: Tokenizer = XMLTokenizer()
    else:
        tokenizer = load_tokenizer(args.tokenizer)

    input_files = [Path(p) for p in sorted(glob.glob(args.inputs))]
    if not input_files:
        raise ArgumentParseError(f"No input files found: {args.inputs}")

    outdir = Path(args.outdir)
    if outdir.exists():
        print(
            f"Out directory already exists: {outdir}"
            + (" Replacing." if args.replace else "")
        )
        if args.replace:
            shutil.rmtree(outdir)
        else:
            raise ArgumentParseError(
                "Out directory already exists, use --replace to replace."
            )

    outdir.mkdir(parents=True)
    logger = SimpleLogger(outdir / "log.txt")

    return Config(
        input_files,
        outdir,
        options,
        tokenizer,
        logger,
        ProfileLogger(),
        args.halt_on_error,
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = parse_args(argv)
    except ArgumentParseError as e:
        print(str(e))
        return 1
    try:
        failures = generate_results(config)
    finally:
        config.logger.close()
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
