import json
import logging
import re
from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)


class Statistics:
    """
    Receives all broker traffic as an independent "recorder".

    Records elevator trajectories, hall call registrations and their
    service times, door events and assignments, and keeps every event in
    JSON Lines format for offline playback.
    """
    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.elevator_trajectories = {}  # elevator_name -> [(time, floor)]
        self.hall_calls_history = []  # registrations
        self.hall_call_off_history = {}  # serviced_by -> [off events]
        self.door_events_history = {}  # elevator_name -> [door events]
        self.assignments = []
        self.waiting_times = []  # seconds from registration to call off
        self._registered_at = {}  # (floor, direction) -> registration time

        self.event_log = []
        self.simulation_metadata = {}

    def _add_event_log(self, event_type, event_data):
        self.event_log.append({
            "time": self.env.now,
            "type": event_type,
            "data": event_data
        })

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation configuration (num_floors, elevators, etc.)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """
        Main process to start intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data.get('topic', ''), data.get('message', {}))

    def record(self, topic, message):
        """Dispatch one broker message to the matching recorder"""
        move_match = re.match(r'elevator/(.*?)/move_started$', topic)
        if move_match:
            self._record_move(move_match.group(1), message)
            return

        door_match = re.match(r'elevator/(.*?)/door_events$', topic)
        if door_match:
            elevator_name = door_match.group(1)
            self.door_events_history.setdefault(elevator_name, []).append({
                'timestamp': message['timestamp'],
                'event_type': message['event_type'],
                'floor': message['floor']
            })
            self._add_event_log(message['event_type'].lower(), {
                'elevator': elevator_name,
                'floor': message['floor']
            })
            return

        status_match = re.match(r'elevator/(.*?)/status$', topic)
        if status_match:
            elevator_name = status_match.group(1)
            self._append_trajectory(elevator_name, message['timestamp'], message['current_floor'])
            self._add_event_log('elevator_status', {
                'elevator': elevator_name,
                'floor': message['current_floor'],
                'state': message['state'],
                'stops': message['stops']
            })
            return

        if re.match(r'hall_button/floor_\d+/new_hall_call$', topic):
            key = (message['floor'], message['direction'])
            self._registered_at[key] = message['timestamp']
            self.hall_calls_history.append(dict(message))
            self._add_event_log('hall_call_registered', {
                'floor': message['floor'],
                'direction': message['direction']
            })
            return

        if re.match(r'hall_button/floor_\d+/call_off$', topic):
            self._record_call_off(message)
            return

        if topic == 'gcs/hall_call_assignment':
            self.assignments.append(dict(message))
            self._add_event_log('hall_call_assignment', {
                'floor': message['floor'],
                'direction': message['direction'],
                'elevator': message['assigned_elevator'],
                'assignment': message['assignment']
            })

    def _record_move(self, elevator_name, message):
        start = message['timestamp']
        arrival = start + message['duration_ms'] / 1000.0
        self._append_trajectory(elevator_name, start, message['from_floor'])
        self._append_trajectory(elevator_name, arrival, message['to_floor'])
        self._add_event_log('move_started', {
            'elevator': elevator_name,
            'from_floor': message['from_floor'],
            'to_floor': message['to_floor'],
            'duration_ms': message['duration_ms']
        })

    def _record_call_off(self, message):
        serviced_by = message['serviced_by']
        self.hall_call_off_history.setdefault(serviced_by, []).append(dict(message))

        registered_at = self._registered_at.pop((message['floor'], message['direction']), None)
        if registered_at is not None:
            self.waiting_times.append(message['timestamp'] - registered_at)
        else:
            logger.warning(f"{self.env.now:.2f} [Statistics] Call off at floor {message['floor']} ({message['direction']}) without registration.")

        self._add_event_log('hall_call_off', {
            'floor': message['floor'],
            'direction': message['direction'],
            'elevator': serviced_by
        })

    def _append_trajectory(self, elevator_name, timestamp, floor):
        trajectory = self.elevator_trajectories.setdefault(elevator_name, [])
        # Record if not exactly the same as the last data point
        if not trajectory or trajectory[-1] != (timestamp, floor):
            trajectory.append((timestamp, floor))

    def summary(self):
        """
        Waiting time figures (registration to indicator clear)

        Returns:
            dict with count, served, unserved, average, p95 and max (seconds)
        """
        waits = np.asarray(self.waiting_times, dtype=float)
        result = {
            'registered': len(self.hall_calls_history),
            'served': int(waits.size),
            'unserved': len(self._registered_at),
            'assignments': len(self.assignments),
            'merges': sum(1 for a in self.assignments if a['assignment'] == 'MERGE'),
        }
        if waits.size:
            result.update({
                'average_wait': float(waits.mean()),
                'p95_wait': float(np.percentile(waits, 95)),
                'max_wait': float(waits.max()),
            })
        else:
            result.update({'average_wait': 0.0, 'p95_wait': 0.0, 'max_wait': 0.0})
        return result

    def print_summary(self):
        metrics = self.summary()
        print("\n" + "=" * 60)
        print("   DISPATCH METRICS SUMMARY")
        print("=" * 60)
        print(f"  Calls registered: {metrics['registered']:>6}")
        print(f"  Calls served:     {metrics['served']:>6}")
        print(f"  Still waiting:    {metrics['unserved']:>6}")
        print(f"  Assignments:      {metrics['assignments']:>6} ({metrics['merges']} merged)")
        if metrics['served']:
            print(f"\nWaiting Time (Registration to Arrival):")
            print(f"  Average: {metrics['average_wait']:>6.2f} seconds")
            print(f"  P95:     {metrics['p95_wait']:>6.2f} seconds")
            print(f"  Max:     {metrics['max_wait']:>6.2f} seconds")
        print("=" * 60)

    def plot_trajectory_diagram(self, output_filename='elevator_trajectory_diagram.png', show=False):
        """Draw trajectory diagram after simulation ends"""
        logger.info("Plotting elevator trajectory diagram")
        fig = plt.figure(figsize=(14, 8))

        elevator_colors = ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b']
        elevator_names = sorted(self.elevator_trajectories, key=lambda name: int(name.rsplit('_', 1)[-1]))

        for idx, name in enumerate(elevator_names):
            trajectory = sorted(self.elevator_trajectories[name], key=lambda x: x[0])
            if not trajectory:
                continue
            times, floors = zip(*trajectory)
            color = elevator_colors[idx % len(elevator_colors)]
            plt.plot(times, floors, label=name, linewidth=2.5, color=color, alpha=0.8)

            for event in self.door_events_history.get(name, []):
                if event['event_type'] == 'DOOR_OPENED':
                    plt.scatter(event['timestamp'], event['floor'], marker='|', s=200, color=color)

            for off in self.hall_call_off_history.get(name, []):
                plt.annotate('✕', (off['timestamp'], off['floor']), color=color,
                             ha='center', va='center', fontsize=10)

        for call in self.hall_calls_history:
            arrow = '↑' if call['direction'] == 'UP' else '↓'
            plt.annotate(arrow, (call['timestamp'], call['floor']), color='gray',
                         ha='center', va='center', fontsize=12)

        plt.title("Elevator Trajectory Diagram")
        plt.xlabel("Time (s)")
        plt.ylabel("Floor")
        plt.grid(True, which='both', linestyle='--', alpha=0.7)

        all_floors = [floor for trajectory in self.elevator_trajectories.values() for _, floor in trajectory]
        if all_floors:
            plt.yticks(range(int(min(all_floors)), int(max(all_floors)) + 2))
        if elevator_names:
            plt.legend(loc='upper right', fontsize=10)

        plt.savefig(output_filename, dpi=150, bbox_inches='tight')
        logger.info(f"Trajectory diagram saved to: {output_filename}")
        if show:
            plt.show()
        plt.close(fig)
        return output_filename

    def save_event_log(self, filename='simulation_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file (default: 'simulation_log.jsonl')
        """
        with open(filename, 'w', encoding='utf-8') as f:
            # Write metadata as first line
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        logger.info(f"Event log saved: {len(self.event_log)} events written to {filename}")
        return filename
