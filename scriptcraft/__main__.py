import argparse
import logging
import sys
from pathlib import Path

from .core.config import get_config_value
from .core.cs_parser import check_syntax, parse_csharp_file, parse_csharp_folder
from .core.generator import UnknownClassKindError, generate_code, suggested_file_name
from .core.model.serialization import ProjectLoadError, dump_project, load_project


def setup_logging(log_level: str = "INFO", stream=sys.stdout) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(stream)
        ]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def _print_warnings(warnings) -> None:
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)


def _write_output(text: str, output) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {output}")
    else:
        sys.stdout.write(text)


def cmd_serve(args) -> int:
    import uvicorn

    from .api.app import create_app

    host = args.host or get_config_value("server", "host", default="127.0.0.1")
    port = args.port or int(get_config_value("server", "port", default=9010))
    logger.info(f"Starting ScriptCraft API on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level=args.log_level.lower())
    return 0


def cmd_generate(args) -> int:
    try:
        project = load_project(Path(args.project).read_text(encoding="utf-8"))
        code = generate_code(project)
    except (OSError, ProjectLoadError, UnknownClassKindError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.check:
        _print_warnings(check_syntax(code))
    output = args.output
    if output and Path(output).is_dir():
        output = str(Path(output) / suggested_file_name(project))
    _write_output(code, output)
    return 0


def cmd_parse(args) -> int:
    paths = [Path(p) for p in args.files]
    try:
        sources = [(p.name, p.read_text(encoding="utf-8")) for p in paths]
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if len(sources) == 1:
        result = parse_csharp_file(*sources[0])
    else:
        result = parse_csharp_folder(sources)

    _print_warnings(result.warnings)
    _write_output(dump_project(result.project) + "\n", args.output)
    return 0


def main(argv=None) -> int:
    """Main entry point for ScriptCraft."""
    parser = argparse.ArgumentParser(description="ScriptCraft - Unity editor-script designer backend")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None, help="Bind address (config: server.host)")
    serve.add_argument("--port", type=int, default=None, help="Port (config: server.port)")
    serve.set_defaults(func=cmd_serve)

    generate = subparsers.add_parser("generate", help="Render a saved project to C#")
    generate.add_argument("project", help="Project JSON file")
    generate.add_argument("-o", "--output", help="Output .cs file or directory (default: stdout)")
    generate.add_argument("--check", action="store_true", help="Report tree-sitter syntax findings")
    generate.set_defaults(func=cmd_generate)

    parse = subparsers.add_parser("parse", help="Recover a project from C# files")
    parse.add_argument("files", nargs="+", help="One .cs file, or several parsed as one script")
    parse.add_argument("-o", "--output", help="Output project JSON file (default: stdout)")
    parse.set_defaults(func=cmd_parse)

    args = parser.parse_args(argv)
    # generate/parse write their result to stdout
    setup_logging(args.log_level, sys.stdout if args.command == "serve" else sys.stderr)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
