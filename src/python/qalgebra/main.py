#!/usr/bin/env python3
"""
===============================================================================
QALGEBRA - COMMAND LINE ENTRY POINT
===============================================================================
Evaluate quaternion expressions from the shell or from a YAML worksheet.

USAGE:
    qalgebra eval mul 1,2,3,4 1,2,3,4      # -28 + 4i + 6j + 8k
    qalgebra eval norm 1,2,3,4             # 5.47723
    qalgebra eval div-scalar 1,2,3,4 2     # 0.5 + 1i + 1.5j + 2k
    qalgebra run worksheet.yaml            # evaluate a worksheet
    qalgebra --strict run worksheet.yaml   # stop at the first failure
    qalgebra eval add -- -1,2,3,4 1,0,0,0  # "--" before negative operands

QUATERNION OPERANDS:
    Comma-separated components, 1, 2 or 4 of them:
        "3"        -> 3 + 0i + 0j + 0k
        "1,2"      -> 1 + 2i + 0j + 0k
        "1,2,3,4"  -> 1 + 2i + 3j + 4k

WORKSHEET FORMAT:
    quaternions:
      a: [1, 2, 3, 4]
      b: [4, 3, 2, 1]
    operations:
      - {name: ab, op: mul, args: [a, b]}
      - {name: half, op: div-scalar, args: [ab, 2]}

    Operation args are quaternion names, names of earlier results, or
    numbers.

EXIT CODES:
    0  success
    1  an operation failed (division by a near-zero divisor)
    2  usage or worksheet error
===============================================================================
"""

import argparse
import logging
import operator
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from qalgebra import __version__
from qalgebra.exceptions import QuaternionDivisionError
from qalgebra.quaternion import Quaternion, conjugate, inverse, norm
from qalgebra.scalar import format_scalar, is_finite, is_scalar

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# Operand kinds: 'q' = quaternion, 's' = scalar.
OPERATIONS: Dict[str, Tuple[Tuple[str, ...], Callable[..., Any]]] = {
    'add':        (('q', 'q'), operator.add),
    'sub':        (('q', 'q'), operator.sub),
    'mul':        (('q', 'q'), operator.mul),
    'div':        (('q', 'q'), operator.truediv),
    'scale':      (('q', 's'), operator.mul),
    'div-scalar': (('q', 's'), operator.truediv),
    'neg':        (('q',), operator.neg),
    'conj':       (('q',), conjugate),
    'inv':        (('q',), inverse),
    'norm':       (('q',), norm),
}


class WorksheetError(ValueError):
    """Malformed worksheet or command-line operand."""


# =============================================================================
# PARSING
# =============================================================================

def parse_quaternion(text: str) -> Quaternion:
    """
    Parse a comma-separated component list into a quaternion.

    Args:
        text: "t", "t,u" or "t,u,v,w"

    Returns:
        Quaternion with float components

    Raises:
        WorksheetError: on non-numeric components or a bad component count
    """
    try:
        components = [float(part) for part in text.split(',')]
    except ValueError as exc:
        raise WorksheetError(f"Invalid quaternion '{text}': {exc}") from exc
    return _build_quaternion(components, text)


def _build_quaternion(components: List[Any], label: str) -> Quaternion:
    if len(components) not in (1, 2, 4):
        raise WorksheetError(
            f"Quaternion '{label}' needs 1, 2 or 4 components, "
            f"got {len(components)}"
        )
    try:
        return Quaternion(*components)
    except ValueError as exc:
        raise WorksheetError(f"Invalid quaternion '{label}': {exc}") from exc


def parse_scalar(text: str) -> float:
    """Parse a finite scalar operand."""
    try:
        value = float(text)
    except ValueError as exc:
        raise WorksheetError(f"Invalid scalar '{text}'") from exc
    if not is_finite(value):
        raise WorksheetError(f"Scalar operand must be finite, got '{text}'")
    return value


def render(value: Any) -> str:
    """Text form of an operation result (quaternion or scalar)."""
    if isinstance(value, Quaternion):
        return str(value)
    return format_scalar(value)


# =============================================================================
# EVALUATION
# =============================================================================

def apply_operation(op: str, operands: List[Any]) -> Any:
    """
    Apply a named operation after checking operand count and kinds.

    Raises:
        WorksheetError: unknown op, wrong operand count or kind
        QuaternionDivisionError: division by a near-zero divisor
    """
    if not isinstance(op, str) or op not in OPERATIONS:
        raise WorksheetError(
            f"Unknown operation {op!r} (expected one of: {', '.join(OPERATIONS)})"
        )
    kinds, func = OPERATIONS[op]

    if len(operands) != len(kinds):
        raise WorksheetError(
            f"Operation '{op}' takes {len(kinds)} operand(s), got {len(operands)}"
        )
    for kind, value in zip(kinds, operands):
        if kind == 'q' and not isinstance(value, Quaternion):
            raise WorksheetError(f"Operation '{op}' expects a quaternion, got {value!r}")
        if kind == 's' and not is_scalar(value):
            raise WorksheetError(f"Operation '{op}' expects a scalar, got {value!r}")

    return func(*operands)


def load_worksheet(path: str) -> dict:
    """
    Load a worksheet from a YAML file.

    Args:
        path: Path to the worksheet YAML

    Returns:
        Dictionary with 'quaternions' and 'operations' sections
    """
    logger.info(f"Loading worksheet from: {path}")
    try:
        with open(path, 'r') as f:
            worksheet = yaml.safe_load(f)
    except OSError as exc:
        raise WorksheetError(f"Cannot read worksheet {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise WorksheetError(f"Malformed YAML in {path}: {exc}") from exc

    if not isinstance(worksheet, dict):
        raise WorksheetError(f"Worksheet {path} must be a mapping")
    if not isinstance(worksheet.get('quaternions') or {}, dict):
        raise WorksheetError("'quaternions' must be a mapping of name -> components")
    if not isinstance(worksheet.get('operations') or [], list):
        raise WorksheetError("'operations' must be a list")
    return worksheet


def _resolve(arg: Any, env: Dict[str, Any]) -> Any:
    if isinstance(arg, bool):
        raise WorksheetError(f"Invalid operand {arg!r}")
    if is_scalar(arg):
        if not is_finite(arg):
            raise WorksheetError(f"Scalar operand must be finite, got {arg!r}")
        return float(arg)
    if isinstance(arg, str):
        if arg not in env:
            raise WorksheetError(f"Unknown name '{arg}'")
        return env[arg]
    raise WorksheetError(f"Invalid operand {arg!r}")


def evaluate_worksheet(worksheet: dict,
                       strict: bool = False) -> Tuple[Dict[str, Any], List[str]]:
    """
    Evaluate every operation in a worksheet, in order.

    Args:
        worksheet: Dictionary from load_worksheet()
        strict: If True, a division failure propagates immediately.
                Otherwise the step is logged and skipped; later steps that
                reference it fail with WorksheetError.

    Returns:
        (results, failed) where results maps operation name -> value and
        failed lists the names of operations that raised a division error
    """
    env: Dict[str, Any] = {}
    for name, components in (worksheet.get('quaternions') or {}).items():
        if not isinstance(components, list):
            components = [components]
        if not all(is_scalar(c) and not isinstance(c, bool) for c in components):
            raise WorksheetError(f"Quaternion '{name}' has non-numeric components")
        env[name] = _build_quaternion([float(c) for c in components], name)
    logger.info(f"Defined {len(env)} quaternion(s)")

    results: Dict[str, Any] = {}
    failed: List[str] = []

    for index, step in enumerate(worksheet.get('operations') or []):
        if not isinstance(step, dict) or 'op' not in step:
            raise WorksheetError(f"Operation #{index} must be a mapping with an 'op' key")
        name = str(step.get('name', f"result_{index}"))
        args = step.get('args', [])
        if not isinstance(args, list):
            args = [args]

        operands = [_resolve(arg, env) for arg in args]
        try:
            value = apply_operation(step['op'], operands)
        except QuaternionDivisionError as exc:
            if strict:
                raise
            logger.error(f"Operation '{name}' failed: {exc}")
            failed.append(name)
            continue

        logger.debug(f"{name} = {render(value)}")
        env[name] = value
        results[name] = value

    return results, failed


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_eval(args: argparse.Namespace) -> int:
    """Evaluate one operation given on the command line."""
    kinds, _ = OPERATIONS[args.op]
    if len(args.operands) != len(kinds):
        raise WorksheetError(
            f"Operation '{args.op}' takes {len(kinds)} operand(s), "
            f"got {len(args.operands)}"
        )
    operands = [parse_quaternion(text) if kind == 'q' else parse_scalar(text)
                for kind, text in zip(kinds, args.operands)]

    try:
        value = apply_operation(args.op, operands)
    except QuaternionDivisionError as exc:
        logger.error(str(exc))
        return 1

    print(render(value))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Evaluate a worksheet file and print each result."""
    worksheet = load_worksheet(args.worksheet)

    try:
        results, failed = evaluate_worksheet(worksheet, strict=args.strict)
    except QuaternionDivisionError as exc:
        logger.error(f"Worksheet aborted: {exc}")
        return 1

    for name, value in results.items():
        print(f"{name} = {render(value)}")

    if failed:
        logger.warning(f"{len(failed)} operation(s) failed: {', '.join(failed)}")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='qalgebra',
        description='Quaternion algebra calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  qalgebra eval mul 0,1,0,0 0,0,1,0     i * j = k
  qalgebra eval inv 1,2,3,4             Inverse
  qalgebra run worksheet.yaml           Evaluate a worksheet
        """
    )
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: WARNING)')
    parser.add_argument('--strict', action='store_true',
                        help='Abort a worksheet at the first failed operation')

    subparsers = parser.add_subparsers(dest='command', required=True)

    eval_parser = subparsers.add_parser('eval', help='Evaluate one operation')
    eval_parser.add_argument('op', choices=list(OPERATIONS),
                             help='Operation name')
    eval_parser.add_argument('operands', nargs='+',
                             help='Quaternion ("1,2,3,4") or scalar operands')
    eval_parser.set_defaults(handler=cmd_eval)

    run_parser = subparsers.add_parser('run', help='Evaluate a YAML worksheet')
    run_parser.add_argument('worksheet', type=str,
                            help='Path to worksheet YAML')
    run_parser.set_defaults(handler=cmd_run)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Parses command line arguments and runs the
    requested command.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    try:
        return args.handler(args)
    except WorksheetError as exc:
        logger.error(str(exc))
        return 2


if __name__ == '__main__':
    sys.exit(main())
