from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Optional

from colorama import Fore, Style

from .errors import BootstrapError, FatalStepError
from .logging_utils import configure_logging, default_log_path, log_success
from .manifest import load_manifest
from .options import RunOptions
from .pipeline import BootstrapCtx, PipelineResult, run_pipeline
from .steps import (
    CorePackagesStep,
    DefaultShellStep,
    DeployConfigsStep,
    FontStep,
    HistoryToolStep,
    InitSnippetsStep,
    PluginsStep,
    PreflightStep,
    PromptToolStep,
    ShellFrameworkStep,
)

logger = logging.getLogger(__name__)

BANNER = "Zsh Setup with Starship & Atuin"


def build_steps():
    return [
        PreflightStep(),
        CorePackagesStep(),
        DefaultShellStep(),
        FontStep(),
        ShellFrameworkStep(),
        PluginsStep(),
        PromptToolStep(),
        HistoryToolStep(),
        InitSnippetsStep(),
        DeployConfigsStep(),
    ]


def _raise_on_sigterm(signum, frame) -> None:
    # Unwinds through the finally/with blocks that remove temporary files.
    raise SystemExit(128 + signum)


def run(options: RunOptions) -> PipelineResult:
    """Provision the environment described by the manifest."""

    ctx = BootstrapCtx(options=options, manifest=load_manifest(options.manifest_path))
    return run_pipeline(ctx=ctx, steps=build_steps())


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="zsh-bootstrap",
        description="Install Zsh, Oh-My-Zsh, plugins, Starship and Atuin, then deploy their configuration.",
    )
    p.add_argument("--dry-run", action="store_true", help="Show what would be done, don't perform destructive changes")
    p.add_argument(
        "--clean",
        "--force",
        dest="clean",
        action="store_true",
        help="Clean install: replace existing configuration files without backups",
    )
    p.add_argument(
        "--install-font",
        action="store_true",
        help="Attempt to download and install a Nerd Font (only useful on UI/dev machines)",
    )
    p.add_argument("--config", default=None, help="YAML manifest merged over the built-in one")
    p.add_argument("--log", default=None, help=f"Log file (default: {default_log_path()}; none in dry-run)")
    p.add_argument("-v", "--verbose", action="store_true", help="Show executed commands and debug output")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    options = RunOptions(
        dry_run=bool(args.dry_run),
        clean=bool(args.clean),
        install_font=bool(args.install_font),
        verbose=bool(args.verbose),
        manifest_path=args.config,
        log_path=args.log or (None if args.dry_run else default_log_path()),
    )

    configure_logging(
        log_path=options.log_path,
        level=logging.DEBUG if options.verbose else logging.INFO,
    )
    previous = signal.signal(signal.SIGTERM, _raise_on_sigterm)

    print(f"{Fore.BLUE}========================================")
    print(f"  {BANNER}")
    print(f"========================================{Style.RESET_ALL}\n")

    try:
        result = run(options)
    except FatalStepError as e:
        logger.error("Aborting: %s", e.message)
        return 1
    except BootstrapError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    finally:
        signal.signal(signal.SIGTERM, previous)

    warnings = result.report.get("warnings") or []
    if warnings:
        logger.warning("Finished with %d warning(s):", len(warnings))
        for w in warnings:
            logger.warning("  [%s] %s", w["step"], w["message"])

    print()
    log_success(logger, "Installation complete (or dry-run finished).")
    print(f"\nℹ️  Please restart your shell or run: {Fore.YELLOW}exec zsh{Style.RESET_ALL}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
