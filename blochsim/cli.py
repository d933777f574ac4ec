import argparse
import json
import sys

from blochsim.compiler.examples import get_example, list_examples
from blochsim.compiler.parser import circuit_from_dict, load_circuit
from blochsim.core.gates import PARAMETRIC_GATES, gate_catalog
from blochsim.core.io_spec import DEFAULT_MAX_QUBITS, SimulatorConfig
from blochsim.logging import set_log_level
from blochsim.runtime.engine import Simulator


def _print_states(result, as_json):
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return
    for state in result.states:
        x, y, z = state.bloch_vector
        print(f"q{state.qubit}: P(1)={state.probability_one():.4f} purity={state.purity:.4f} "
              f"bloch=({x:+.4f}, {y:+.4f}, {z:+.4f})")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="blochsim",
        description="Density-matrix circuit simulator reporting per-qubit Bloch vectors"
    )
    parser.add_argument("--legacy", action="store_true",
                        help="use the real-valued legacy gate approximations")
    parser.add_argument("--max-qubits", type=int, default=DEFAULT_MAX_QUBITS,
                        help="largest qubit count accepted")
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="simulate a circuit JSON file")
    run.add_argument("circuit", help="path to a circuit JSON file, or '-' for stdin")

    example = sub.add_parser("example", help="simulate a preset circuit")
    example.add_argument("name", nargs="?", help="preset name; omit to list presets")

    sub.add_parser("gates", help="list the gate catalog")
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")

    if args.command == "gates":
        catalog = gate_catalog()
        print("single-qubit:", " ".join(catalog["single"]))
        print("two-qubit:   ", " ".join(catalog["two"]))
        print("parametric:  ", " ".join(PARAMETRIC_GATES), "(param: theta)")
        return 0

    if args.command == "example" and not args.name:
        for name in list_examples():
            print(name)
        return 0

    if args.command not in ("run", "example"):
        parser.print_help()
        return 1

    try:
        config = SimulatorConfig(
            gate_set="legacy" if args.legacy else "standard",
            max_qubits=args.max_qubits,
        )
        if args.command == "run":
            if args.circuit == "-":
                circuit = circuit_from_dict(json.load(sys.stdin))
            else:
                circuit = load_circuit(args.circuit)
        else:
            circuit = get_example(args.name)
        result = Simulator(config).execute(circuit)
    except KeyError as exc:
        print(f"error: {exc.args[0]}", file=sys.stderr)
        return 2
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except MemoryError:
        print("error: not enough memory for a circuit this size", file=sys.stderr)
        return 2

    _print_states(result, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
