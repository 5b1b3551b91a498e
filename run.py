# run.py
import argparse
import json
import logging

from emergencyParking.config import PRESETS
from emergencyParking.model import ParkingLotModel
from emergencyParking.plots import plot_counters, plot_preset_comparison


def run_once(params, seed=None, cycles=None):
    params = dict(params)
    if cycles is not None:
        params["total_cycles"] = cycles
    model = ParkingLotModel(seed=seed, **params)
    model.run_model()
    return model


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Emergency parking lot negotiation model")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="baseline")
    parser.add_argument("--sweep", action="store_true", help="run every preset")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--cycles", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--high-willingness", type=float, default=None)
    parser.add_argument("--threshold", type=int, default=None, help="liar detection threshold")
    parser.add_argument("--parking-rate", type=float, default=None)
    parser.add_argument("--no-liars", action="store_true")
    parser.add_argument("--plot", action="store_true")
    parser.add_argument("--extended", action="store_true", help="also report evictions, departures and flags")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def overrides_from(args):
    params = {}
    if args.width is not None:
        params["width"] = args.width
    if args.height is not None:
        params["height"] = args.height
    if args.high_willingness is not None:
        params["high_willingness_percentage"] = args.high_willingness
    if args.threshold is not None:
        params["liar_detection_threshold"] = args.threshold
    if args.parking_rate is not None:
        params["parking_rate"] = args.parking_rate
    if args.no_liars:
        params["include_liars"] = False
    return params


def summarize(model, extended=False):
    if extended:
        return model.stats.extended_summary()
    return model.stats.summary()


def run_cli(argv=None):
    """Run the command line and return the printed results."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    overrides = overrides_from(args)

    if args.sweep:
        results = {}
        for name, preset in PRESETS.items():
            model = run_once({**preset, **overrides}, seed=args.seed, cycles=args.cycles)
            results[name] = summarize(model, args.extended)
        print(json.dumps(results, indent=2))
        if args.plot:
            plot_preset_comparison(results)
        return results

    model = run_once({**PRESETS[args.preset], **overrides}, seed=args.seed, cycles=args.cycles)
    summary = summarize(model, args.extended)
    print(json.dumps(summary, indent=2))
    if args.plot:
        plot_counters(model)
    return summary


def main(argv=None):
    run_cli(argv)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Interrupted.")
