# emulink/cli/main.py
from __future__ import annotations

from typing import Optional

from emulink.common.logging import configure_logging
from emulink.core.errors import EmuLinkError

from emulink.cli.args import log_level, parse_args
from emulink.cli.commands import cmd_config, cmd_invoke, resolve_config


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(log_level(args.verbose), log_file=args.log_file)

    try:
        config = resolve_config(args)

        if args.cmd == "config":
            return cmd_config(config)
        if args.cmd == "invoke":
            return cmd_invoke(
                config,
                command_code=args.command_code,
                invocation_id=args.invocation_id,
                payload=args.payload,
                timeout_s=args.timeout,
                trace=args.trace,
            )

        return 2
    except EmuLinkError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
