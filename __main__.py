#!/usr/bin/env python3
"""
Formula Field - Number Input Demo
Entry Point Module
Handles dependency checking, argument parsing, field configuration and
application startup.
"""
import argparse
import os
import sys
import time
import traceback
from pathlib import Path
from typing import Optional, List
def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Formula Field - number input with formulas and formatting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python .                              # Start the demo form
  python . --check-deps                 # Check dependencies only
  python . --min 10 --max 20 --step 5   # Bounded fields with wheel steps
  python . --decimals 3 --fields 5      # Five fields with three decimals
  python . --debug --log-dir ./logs     # Debug logging to a custom directory
        """
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version="Formula Field 1.0.0"
    )
    parser.add_argument(
        "--check-deps", "-c",
        action="store_true",
        help="Check dependencies and exit"
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force start application even if dependencies are missing"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        help="Custom directory for log files"
    )
    parser.add_argument(
        "--fields",
        type=int,
        default=3,
        help="Number of number fields in the demo form (default: 3)"
    )
    parser.add_argument("--min", default="*", help="Minimum value, '*' for none")
    parser.add_argument("--max", default="*", help="Maximum value, '*' for none")
    parser.add_argument("--step", default="*", help="Wheel step, '*' to disable wheel adjustment")
    parser.add_argument("--decimals", default="*", help="Decimal places, '*' for 2")
    parser.add_argument(
        "--decimal-policy",
        choices=["commit", "live_blur"],
        default="commit",
        help="Enforce decimals only when committing, or blur as soon as too many are typed"
    )
    return parser.parse_args(argv)
def check_dependencies() -> bool:
    """Check if required dependencies are available."""
    # Package name mapping: display_name -> (import_name, description)
    required_packages = {
        'PySide6': ('PySide6', 'GUI framework'),
        'numpy': ('numpy', 'Formula evaluation'),
    }
    missing_required = []
    print(f"Python version: {sys.version}")
    print(f"Python executable: {sys.executable}\n")
    for display_name, (import_name, description) in required_packages.items():
        try:
            module = __import__(import_name)
            if import_name == 'PySide6':
                from PySide6 import QtCore, QtWidgets, QtGui
            print(f"OK {display_name}: {description} (version: {getattr(module, '__version__', 'unknown')})")
        except ImportError as e:
            missing_required.append(f"{display_name} ({description})")
            print(f"ERROR {display_name}: {description} - MISSING")
            print(f"   Import error: {e}")
    if missing_required:
        print("\nMissing required dependencies:")
        for package in missing_required:
            print(f"   - {package}")
        install_names = [package.split()[0] for package in missing_required]
        print("\nTry installing with:")
        print("   pip install " + " ".join(install_names))
        return False
    return True
def setup_environment(log_dir: Optional[str] = None) -> Path:
    """Setup the application environment and return the log directory."""
    current_dir = Path(__file__).parent
    if str(current_dir) not in sys.path:
        sys.path.insert(0, str(current_dir))
    os.environ.setdefault('QT_AUTO_SCREEN_SCALE_FACTOR', '1')
    os.environ.setdefault('QT_ENABLE_HIGHDPI_SCALING', '1')
    logs = Path(log_dir) if log_dir else Path.home() / "FormulaField" / "logs"
    logs.mkdir(parents=True, exist_ok=True)
    return logs
def build_config(args: argparse.Namespace):
    """Validate the configuration flags and build the shared field config.

    Returns ``(config, issues)``; ``config`` is None when there are issues.
    """
    from field_config import FieldConfig, validate_configuration
    settings = {
        'min': args.min,
        'max': args.max,
        'step': args.step,
        'decimals': args.decimals,
        'decimal_policy': args.decimal_policy,
    }
    issues = validate_configuration(settings)
    if issues:
        return None, issues
    return FieldConfig.from_text(**settings), []
def main(argv: Optional[List[str]] = None):
    """Main entry point for Formula Field."""
    try:
        args = parse_arguments(argv)
        print("\n" + "="*60)
        print("Formula Field - Number Input Demo")
        print("="*60 + "\n")
        log_dir = setup_environment(args.log_dir)
        print("Checking dependencies...")
        deps_ok = check_dependencies()
        if args.check_deps:
            if deps_ok:
                print("\nAll dependencies are satisfied!")
                return 0
            else:
                print("\nSome dependencies are missing!")
                return 1
        if not args.force and not deps_ok:
            print("\nCannot start application due to missing dependencies.")
            print("Use --force to attempt startup anyway, or install missing packages.")
            return 1
        config, issues = build_config(args)
        if issues:
            print("\nInvalid field configuration:")
            for issue in issues:
                print(f"   - {issue.field}: {issue.message}")
            return 2
        from logger import setup_logger
        logger = setup_logger(log_dir=log_dir)
        if args.debug:
            logger.set_log_level("DEBUG")
            print("Debug logging enabled\n")
        from main import main as run_main
        return run_main(field_count=args.fields, config=config)
    except KeyboardInterrupt:
        print("\n\nApplication interrupted by user")
        return 130
    except Exception as e:
        print("\nCritical error starting Formula Field:")
        print(f"   {type(e).__name__}: {e}")
        if args.debug if 'args' in locals() else False:
            print("\nDebug traceback:")
            traceback.print_exc()
        else:
            print("\nRun with --debug for detailed error information")
        return 1
if __name__ == "__main__":
    start_time = time.time()
    exit_code = main()
    runtime = time.time() - start_time
    print(f"\nFormula Field ran for {runtime:.2f} seconds")
    sys.exit(exit_code)
