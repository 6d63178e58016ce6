import logging
import sys

import pandas as pd

from . import config
from . import timeline
from . import trace
from .controller import SimulationController
from .driver import TickDriver
from .errors import PipeviewError
from .hazards import summarize

# add $t2,$t0,$t1 / sub $t3,$t2,$t1 / lw $t4,0($t3) / addi $t4,$t4,1 / sw $t4,4($t3)
DEMO_PROGRAM = [0x01095020, 0x01495822, 0x8D6C0000, 0x218C0001, 0xAD6C0004]


def print_summary(state):
    s = summarize(state.report)
    print("\n" + "=" * 50)
    print(" Hazard Analysis Summary")
    print("=" * 50)
    print(f"  Forwarding:        {'enabled' if state.report.forwarding_enabled else 'disabled'}")
    print(f"  Hazards:           {s.hazard_count}")
    print(f"  Stall cycles:      {s.stall_count}")
    print(f"  Forwarded instrs:  {s.forwarding_count}")
    print(f"  Cycles:            {state.current_cycle}/{state.max_cycles}")
    print("=" * 50 + "\n")


def replay(path):
    print(f"📂 Replaying: {path}")
    print(trace.trace_table(trace.read_vcd(path)).to_string())


def main(argv=None):
    # 1. Setup
    try:
        args, cfg = config.load_settings(argv)
    except PipeviewError as e:
        print(f"❌ Error: {e}")
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')

    if args.replay:
        try:
            replay(args.replay)
        except PipeviewError as e:
            print(f"❌ Error: {e}")
            return 1
        return 0

    if cfg.config_path:
        print(f"⚙️  Using Configuration: {cfg.config_path}")
    program = cfg.program
    if not program:
        print("ℹ️  No program provided, running the built-in demo.")
        program = DEMO_PROGRAM

    # 2. Start the run
    controller = SimulationController(forwarding_enabled=cfg.forwarding)
    try:
        controller.start(program)
    except PipeviewError as e:
        print(f"❌ Error: {e}")
        return 1

    # 3. Drive the clock
    print(f"🧠 Simulating {len(program)} instruction(s)...")
    states = [controller.state]
    driver = TickDriver(controller, interval=cfg.interval, on_tick=states.append)
    try:
        driver.run()
    except KeyboardInterrupt:
        driver.cancel()
        controller.pause()
        print(f"\n⚠️  Interrupted, paused at cycle {controller.state.current_cycle}.")

    # 4. Report
    state = controller.state
    table = timeline.build_timeline(states)
    with pd.option_context('display.max_columns', None, 'display.width', 200):
        print(table.to_string())
        print()
        print(timeline.hazard_table(state).to_string(index=False))
    print_summary(state)

    # 5. Save
    if cfg.csv_path:
        table.to_csv(cfg.csv_path)
        print(f"✅ Table saved to {cfg.csv_path}")
    if cfg.vcd_path:
        trace.write_vcd(states, cfg.vcd_path)
        print(f"✅ VCD file '{cfg.vcd_path}' generated successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
