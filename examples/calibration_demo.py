"""
Sensor Calibration Demo

Steps the VTOL through the six magnetometer calibration cases, two
seconds each, and plots the attitude and the synthesized IMU readings
the autopilot would see.
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import sys
import os

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vtolsim.core.calibration import CalibrationType
from vtolsim.simulation import SimulationRunner

CASES = [
    CalibrationType.MAG_1_NORMAL,
    CalibrationType.MAG_2_OVERTURNED,
    CalibrationType.MAG_3_HEAD_DOWN,
    CalibrationType.MAG_4_HEAD_UP,
    CalibrationType.MAG_5_TURNED_LEFT,
    CalibrationType.MAG_6_TURNED_RIGHT,
]


def main():
    print("=" * 60)
    print("Magnetometer Calibration Sequence")
    print("=" * 60)
    print()

    runner = SimulationRunner(seed=0)
    for case in CASES:
        print(f"Case {int(case)}: {case.name}")
        runner.set_calibration(case)
        runner.run(2.0)
    runner.set_calibration(CalibrationType.WORK_MODE)
    history = runner.run(0.5)
    print()

    print("Generating plots...")
    t = history['time']

    fig, axes = plt.subplots(3, 1, figsize=(12, 10), sharex=True)
    fig.suptitle('Magnetometer Calibration', fontsize=14, fontweight='bold')

    axes[0].plot(t, np.degrees(history['roll']), 'b-', label='Roll', linewidth=1.5)
    axes[0].plot(t, np.degrees(history['pitch']), 'r-', label='Pitch', linewidth=1.5)
    axes[0].plot(t, np.degrees(history['yaw']), 'g-', label='Yaw', linewidth=1.5)
    axes[0].set_ylabel('Angle (deg)')
    axes[0].set_title('Euler Angles')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    for axis, color in zip('xyz', 'brg'):
        axes[1].plot(t, history[f'acc_{axis}'], color=color, label=axis, linewidth=1.0)
    axes[1].set_ylabel('Accel (m/s²)')
    axes[1].set_title('Accelerometer')
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    for axis, color in zip('xyz', 'brg'):
        axes[2].plot(t, history[f'gyro_{axis}'], color=color, label=axis, linewidth=1.0)
    axes[2].set_xlabel('Time (s)')
    axes[2].set_ylabel('Rate (rad/s)')
    axes[2].set_title('Gyroscope')
    axes[2].legend()
    axes[2].grid(True, alpha=0.3)

    plt.tight_layout()

    output_file = os.path.join(os.path.dirname(__file__), 'calibration_demo.png')
    plt.savefig(output_file, dpi=150, bbox_inches='tight')
    print(f"Plot saved to: {output_file}")
    print()

    plt.close('all')

    print("=" * 60)
    print("Calibration Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
