#!/usr/bin/env python3
"""
makefile.py - Developer tasks for lazvlr.

Usage:
    python makefile.py <target>

Requires the dev extra: pip install -e ".[dev]"
"""

import shutil
import subprocess
import sys
from collections import defaultdict
from pathlib import Path

from colorama import Fore, Style
from colorama import init as _colorama_init

_colorama_init(autoreset=True)

ROOT = Path(__file__).resolve().parent


def print_header(title):
    bar = Fore.CYAN + Style.BRIGHT + "=" * 52 + Style.RESET_ALL
    label = Fore.CYAN + Style.BRIGHT + f"  {title}" + Style.RESET_ALL
    print(f"\n{bar}\n{label}\n{bar}")


def print_step(msg):
    print(f"{Fore.YELLOW}-->{Style.RESET_ALL} {msg}")


def print_success(msg):
    print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} {msg}")


def print_warn(msg):
    print(f"{Fore.YELLOW}[WARN]{Style.RESET_ALL} {msg}")


def run_cmd(args, allow_failure=False):
    """
    Run a command as a subprocess, streaming output directly to the terminal.
    Exits with the subprocess exit code on failure unless allow_failure=True.
    """
    try:
        result = subprocess.run(args, cwd=ROOT)
    except FileNotFoundError:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} Command not found: '{args[0]}'")
        if not allow_failure:
            sys.exit(127)
        return 127
    if result.returncode != 0 and not allow_failure:
        sys.exit(result.returncode)
    return result.returncode


def target_test():
    print_header("Running All Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests", "-v"])


def target_test_primitives():
    print_header("Running Header and Index Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests/test_primitives", "-v"])


def target_test_vlrs():
    print_header("Running Payload Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests/test_vlrs", "-v"])


def target_install():
    print_header("Installing lazvlr (editable, dev extra)")
    run_cmd([sys.executable, "-m", "pip", "install", "-e", ".[dev]"])
    print_success("Installed")


def target_build():
    print_header("Building lazvlr")
    run_cmd([sys.executable, "-m", "pip", "wheel", "--no-deps", "-w", "dist", "."])
    print_success("Wheel written to dist/")


def target_clean():
    print_header("Cleaning Build and Test Artifacts")
    for name in ("build", "dist", ".pytest_cache"):
        path = ROOT / name
        if path.exists():
            try:
                shutil.rmtree(path)
                print_step(f"Removed {path}")
            except OSError as exc:
                print_warn(f"Could not remove {path}: {exc}")
    for cache in ROOT.rglob("__pycache__"):
        shutil.rmtree(cache, ignore_errors=True)
    print_success("Clean")


def target_examples():
    print_header("Running Record Walkthrough")
    run_cmd([sys.executable, "examples/vlr_example.py"])


def target_check():
    print_header("Full Check: test + examples")
    target_test()
    target_examples()


TARGETS = {
    "test": (target_test, "Run all tests", "Testing"),
    "test-primitives": (target_test_primitives, "Run header/index tests only", "Testing"),
    "test-vlrs": (target_test_vlrs, "Run payload tests only", "Testing"),
    "install": (target_install, "pip install -e .[dev]", "Build"),
    "build": (target_build, "Build a wheel into dist/", "Build"),
    "clean": (target_clean, "Remove build output and caches", "Build"),
    "check": (target_check, "test + examples", "Build"),
    "examples": (target_examples, "Run examples/vlr_example.py", "Run"),
    "help": (None, "Show this help message", "Meta"),
}


def target_help():
    title = Fore.CYAN + Style.BRIGHT + "lazvlr - Available Commands" + Style.RESET_ALL
    print(f"\n{title}\n")
    groups = defaultdict(list)
    for name, (_, desc, group) in TARGETS.items():
        groups[group].append((name, desc))
    for group in ["Testing", "Build", "Run", "Meta"]:
        if group not in groups:
            continue
        header = Fore.YELLOW + Style.BRIGHT + f"{group}:" + Style.RESET_ALL
        print(header)
        for name, desc in groups[group]:
            padded = name.ljust(24)
            print(f"  {Fore.GREEN}{padded}{Style.RESET_ALL}  {desc}")
        print()


TARGETS["help"] = (target_help, "Show this help message", "Meta")


def main():
    if len(sys.argv) < 2:
        target_help()
        sys.exit(0)

    name = sys.argv[1]

    if name not in TARGETS:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} Unknown target: '{name}'")
        print("  Run:  python makefile.py help  to list all available targets.")
        sys.exit(1)

    func, _, _ = TARGETS[name]
    func()


if __name__ == "__main__":
    main()
