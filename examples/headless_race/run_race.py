#!/usr/bin/env python3
"""
Headless Race Example

This example demonstrates how to:
1. Create a lobby on Monza with an AI field
2. Join a second human driver and send control inputs
3. Drive the tick scheduler by hand, without an HTTP server
4. Read the snapshots a stream subscriber would receive

Run with: python run_race.py
"""

import json

from racelobby import LobbyRegistry, PhysicsEngine
from racelobby.broadcast import BroadcastChannel
from racelobby.session import InputRegistry, RegistryConfig
from racelobby.simulation import TickScheduler
from racelobby.track import build_monza_track


def main():
    print("=" * 60)
    print("RaceLobby Headless Race Example")
    print("=" * 60)

    # Step 1: Create a lobby
    print("\n1. Creating lobby...")
    track = build_monza_track()
    registry = LobbyRegistry(track, RegistryConfig(seed=42))
    lobby, host_id = registry.create_lobby("Host", ai_count=4)

    print(f"   Track: {track.name} ({track.length:.0f} m)")
    print(f"   DRS zones: {[(round(z.start_m), round(z.end_m)) for z in track.drs_zones]}")
    print(f"   Lobby: {lobby.lobby_id}")

    # Step 2: Join a second driver
    print("\n2. Joining a second driver...")
    guest_id = registry.join(lobby.lobby_id, "Guest")
    for car in lobby.cars:
        print(f"   {car.name:<8} {car.car_type.value:<6} grid {car.progress:5.0f} m  {car.color}")

    # Step 3: Race for 60 seconds of simulated time
    print("\n3. Running 600 ticks (60 s at 10 Hz)...")
    inputs = InputRegistry(registry)
    channel = BroadcastChannel(clock=registry.now)
    scheduler = TickScheduler(registry, PhysicsEngine(), channel)
    subscription = channel.subscribe(lobby)

    for tick in range(600):
        # Host goes flat out and uses every assist; guest lifts every few seconds
        in_zone = track.drs_available(lobby.players[host_id].progress)
        inputs.set_input(lobby.lobby_id, host_id, throttle=1.0, drs=in_zone, ers=in_zone)
        guest_throttle = 0.6 if (tick // 30) % 2 else 1.0
        inputs.set_input(lobby.lobby_id, guest_id, throttle=guest_throttle)

        scheduler.run_cycle()

        if (tick + 1) % 150 == 0:
            host = lobby.players[host_id]
            print(f"   Tick {lobby.tick}: Host at {host.progress:6.0f} m, "
                  f"{host.velocity * 3.6:5.1f} km/h, energy {host.energy:.2f}")

    # Step 4: Read the latest stream event
    print("\n4. Latest snapshot on the stream:")
    latest = None
    for _ in range(subscription.pending):
        latest = subscription.get_nowait()
    snapshot = json.loads(latest[len("data: "):])

    print(f"   Tick: {snapshot['tick']}")
    for car in sorted(snapshot["cars"], key=lambda c: c["progress"], reverse=True):
        flags = "".join(f for f, on in (("D", car["drsActive"]), ("E", car["ersActive"])) if on)
        print(f"   {car['name']:<8} {car['progress']:6.0f} m  {car['velocity']:5.1f} m/s  {flags}")
    print(f"   Dropped by slow reader: {subscription.dropped}")

    channel.unsubscribe(lobby, subscription.handle)
    print("\nDone.")


if __name__ == "__main__":
    main()
