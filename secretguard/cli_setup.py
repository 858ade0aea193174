"""
CLI setup/config functions, split out of cli.py.

Handles: find_config, init_config, install_hook, uninstall, confirm_override.
"""

import logging
import shutil
import sys
from contextlib import contextmanager
from pathlib import Path

from .scanner_types import GREEN, NC, RED, YELLOW, Finding

logger = logging.getLogger(__name__)

CONFIG_NAME = "secretguard.yaml"
HOOK_MARKER = "secretguard"
HOOK_COMMAND = "--staged --confirm"


def find_config() -> Path | None:
    """Find secretguard.yaml in project or user home."""
    candidates = [
        Path(CONFIG_NAME),
        Path("config") / CONFIG_NAME,
        Path.home() / ".config" / "secretguard" / CONFIG_NAME,
    ]
    for path in candidates:
        if path.is_file():
            return path
    return None


def get_default_config_path() -> Path:
    """Get path to bundled default.yaml."""
    return Path(__file__).parent / "config" / "default.yaml"


def init_config(target: Path = Path(CONFIG_NAME)) -> bool:
    """Initialize secretguard.yaml in current project."""
    if target.exists():
        logger.info(f"{YELLOW}{target.name} already exists{NC}")
        return False

    default_config = get_default_config_path()
    if not default_config.exists():
        logger.error(f"{RED}ERROR: Default config not found at {default_config}{NC}")
        return False

    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy(default_config, target)
    logger.info(f"{GREEN}Created {target}{NC}")
    logger.info("Next steps:")
    logger.info(f"  1. Edit {target} to add rules or exclusions")
    logger.info("  2. Run: secretguard --hook  (install git pre-commit)")
    return True


def _hook_script() -> str:
    return (
        "#!/bin/bash\n# secretguard pre-commit hook\n"
        "# Blocks commits containing potential secrets unless you confirm\n\n"
        "# Find secretguard command (PATH, local venv, or python -m)\n"
        f"if command -v secretguard &> /dev/null; then\n    secretguard {HOOK_COMMAND}\n"
        f'elif [ -f ".venv/bin/secretguard" ]; then\n    .venv/bin/secretguard {HOOK_COMMAND}\n'
        f'elif [ -f "venv/bin/secretguard" ]; then\n    venv/bin/secretguard {HOOK_COMMAND}\n'
        f"else\n    python3 -m secretguard {HOOK_COMMAND}\nfi\n"
    )


def install_hook() -> bool:
    """Install git pre-commit hook."""
    git_dir = Path(".git")
    if not git_dir.is_dir():
        logger.error(f"{RED}ERROR: Not a git repository{NC}")
        return False

    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(exist_ok=True)
    hook_path = hooks_dir / "pre-commit"

    if hook_path.exists():
        content = hook_path.read_text()
        if HOOK_MARKER in content:
            logger.info(f"{YELLOW}secretguard hook already installed{NC}")
            return True
        logger.info(f"{YELLOW}Appending to existing pre-commit hook{NC}")
        with open(hook_path, "a") as f:
            f.write(f"\n\n# secretguard check\nsecretguard {HOOK_COMMAND} || exit 1\n")
    else:
        hook_path.write_text(_hook_script())

    hook_path.chmod(0o755)
    logger.info(f"{GREEN}Git hook installed at {hook_path}{NC}")
    return True


def _strip_hook(hook_path: Path) -> bool:
    """Remove secretguard lines from a hook. Returns True if the hook changed."""
    content = hook_path.read_text()
    if HOOK_MARKER not in content:
        return False

    if content.startswith("#!/bin/bash\n# secretguard pre-commit hook"):
        hook_path.unlink()
        return True

    lines = content.split("\n")
    new_lines = [line for line in lines if HOOK_MARKER not in line.lower()]
    new_content = "\n".join(new_lines).strip()
    if not new_content or new_content == "#!/bin/bash":
        hook_path.unlink()
        return True

    hook_path.write_text(new_content + "\n")
    logger.info(f"{YELLOW}Removed secretguard from pre-commit hook{NC}")
    return True


def uninstall() -> bool:
    """Uninstall secretguard from current project."""
    removed = []

    config_file = Path(CONFIG_NAME)
    if config_file.exists():
        config_file.unlink()
        removed.append(str(config_file))

    hook_path = Path(".git/hooks/pre-commit")
    if hook_path.exists() and _strip_hook(hook_path):
        removed.append(str(hook_path))

    if removed:
        logger.info(f"{GREEN}Removed:{NC}")
        for f in removed:
            logger.info(f"  - {f}")
        logger.info(f"{GREEN}secretguard uninstalled from this project{NC}")
    else:
        logger.info(f"{YELLOW}Nothing to uninstall{NC}")
    return True


# =============================================================================
# INTERACTIVE OVERRIDE
# =============================================================================


@contextmanager
def terminal_input():
    """Read answers from the controlling terminal inside the block.

    git runs hooks with stdin redirected, so input() would see EOF at once.
    The original stdin is restored and the tty handle closed on exit.
    """
    if sys.stdin is not None and sys.stdin.isatty():
        yield
        return
    try:
        tty = open("/dev/tty")  # noqa: SIM115
    except OSError:
        logger.debug("No controlling terminal available")
        yield
        return

    original = sys.stdin
    sys.stdin = tty
    try:
        yield
    finally:
        sys.stdin = original
        tty.close()


def prompt_user(question: str, default: str = "n") -> bool:
    """Prompt user for yes/no confirmation."""
    suffix = " [Y/n] " if default.lower() == "y" else " [y/N] "
    try:
        response = input(question + suffix).strip().lower()
        if not response:
            return default.lower() == "y"
        return response in ("y", "yes")
    except (EOFError, KeyboardInterrupt):
        logger.info("")
        return False


def confirm_override(findings: list[Finding]) -> bool:
    """Ask the human whether to proceed despite the findings."""
    count = len(findings)
    with terminal_input():
        proceed = prompt_user(f"{YELLOW}{count} potential secret(s) found. Proceed anyway?{NC}")
    if proceed:
        logger.warning(f"{YELLOW}Proceeding despite {count} finding(s){NC}")
    else:
        logger.error(f"{RED}Aborted. Remove the secrets or use: git commit --no-verify{NC}")
    return proceed
