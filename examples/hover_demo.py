"""
VTOL Vertical Flight Demo

Open-loop flight of the Innopolis VTOL with the InnoVTOL mixer:
- Climb on the four lift motors
- Start the pusher engine
- Emulate an engine stall half way through the run
Telemetry is plotted with matplotlib.
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import sys
import os

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vtolsim.simulation import SimulationRunner, SCENARIO_ICE_STALL


def main():
    print("=" * 60)
    print("VTOL Vertical Flight - Innopolis VTOL")
    print("=" * 60)
    print()

    runner = SimulationRunner(seed=0)
    runner.arm()

    # lift motors, aileron (neutral 0.5), elevator, rudder, pusher
    print("Phase 1: climb on lift motors")
    runner.set_actuators([0.75, 0.75, 0.75, 0.75, 0.5, 0.0, 0.0, 0.0])
    runner.run(2.0)

    print("Phase 2: hover thrust with pusher engine")
    runner.set_actuators([0.56, 0.56, 0.56, 0.56, 0.5, 0.0, 0.0, 0.6])
    runner.run(2.0)

    print("Phase 3: engine stall")
    runner.set_scenario(SCENARIO_ICE_STALL)
    history = runner.run(2.0)
    print()

    final = history.iloc[-1]
    print("Final State:")
    print(f"  Position: [{final['north']:.1f}, {final['east']:.1f}, {final['down']:.1f}] m (NED)")
    print(f"  Altitude: {final['z_enu']:.1f} m")
    print(f"  Fuel: {final['fuel']:.3f} %")
    print()

    print("Generating plots...")
    t = history['time']

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    fig.suptitle('VTOL Vertical Flight', fontsize=14, fontweight='bold')

    axes[0, 0].plot(t, history['z_enu'], 'b-', linewidth=2)
    axes[0, 0].set_xlabel('Time (s)')
    axes[0, 0].set_ylabel('Altitude (m)')
    axes[0, 0].set_title('Altitude History')
    axes[0, 0].grid(True, alpha=0.3)

    axes[0, 1].plot(t, history['vn'], 'r-', label='North', linewidth=1.5)
    axes[0, 1].plot(t, history['ve'], 'g-', label='East', linewidth=1.5)
    axes[0, 1].plot(t, history['vd'], 'b-', label='Down', linewidth=1.5)
    axes[0, 1].set_xlabel('Time (s)')
    axes[0, 1].set_ylabel('Velocity (m/s)')
    axes[0, 1].set_title('NED Velocity')
    axes[0, 1].legend()
    axes[0, 1].grid(True, alpha=0.3)

    axes[1, 0].plot(t, np.degrees(history['roll']), 'b-', label='Roll', linewidth=1.5)
    axes[1, 0].plot(t, np.degrees(history['pitch']), 'r-', label='Pitch', linewidth=1.5)
    axes[1, 0].plot(t, np.degrees(history['yaw']), 'g-', label='Yaw', linewidth=1.5)
    axes[1, 0].set_xlabel('Time (s)')
    axes[1, 0].set_ylabel('Angle (deg)')
    axes[1, 0].set_title('Euler Angles')
    axes[1, 0].legend()
    axes[1, 0].grid(True, alpha=0.3)

    for i in range(5):
        axes[1, 1].plot(t, history[f'rpm_{i}'], label=f'Motor {i}', linewidth=1.5)
    axes[1, 1].set_xlabel('Time (s)')
    axes[1, 1].set_ylabel('Speed (rpm)')
    axes[1, 1].set_title('Motor Speeds')
    axes[1, 1].legend()
    axes[1, 1].grid(True, alpha=0.3)

    plt.tight_layout()

    output_file = os.path.join(os.path.dirname(__file__), 'hover_demo.png')
    plt.savefig(output_file, dpi=150, bbox_inches='tight')
    print(f"Plot saved to: {output_file}")
    print()

    plt.close('all')

    print("=" * 60)
    print("Simulation Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
