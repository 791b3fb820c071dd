#!/usr/bin/env python3
"""
Quick example demonstrating smart-office basic usage.

Run with: PYTHONPATH=src python3 example.py

Uses a ManualScheduler so the five-minute auto-release happens instantly.
"""

import logging
from datetime import timedelta

from smart_office import ManualScheduler, RoomManager
from smart_office.commands import (
    BookRoomCommand,
    CommandInvoker,
    ConfigureRoomsCommand,
    GetStatusCommand,
    SetCapacityCommand,
    SetOccupancyCommand,
)
from smart_office.systems import AirConditioningSystem, LightingSystem

logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

print("=" * 60)
print("smart-office Example")
print("=" * 60)

# 1. Registry and control systems
print("\n1. Creating room manager and control systems...")
scheduler = ManualScheduler()
manager = RoomManager(
    scheduler=scheduler,
    observers=[AirConditioningSystem(), LightingSystem()],
)
invoker = CommandInvoker()
print("   ✓ RoomManager created with AC and lighting subscribed")

# 2. Configure the office
print("\n2. Configuring rooms...")
print("   " + invoker.execute(ConfigureRoomsCommand(manager, 3)).message)
print("   " + invoker.execute(SetCapacityCommand(manager, 1, 8)).message)

# 3. Book and occupy a room
print("\n3. Booking and occupying Room 1...")
print("   " + invoker.execute(BookRoomCommand(manager, 1, "09:00", 60)).message)
print("   " + invoker.execute(BookRoomCommand(manager, 1, "10:00", 30)).message)
print("   " + invoker.execute(SetOccupancyCommand(manager, 1, 2)).message)
print("   " + invoker.execute(SetOccupancyCommand(manager, 1, 0)).message)

# 4. Let five minutes pass with nobody in the room
print("\n4. Advancing clock by 5 minutes...")
scheduler.advance(timedelta(minutes=5))
print("   " + invoker.execute(GetStatusCommand(manager, 1)).message)

# 5. Undo
print("\n5. Undoing last command...")
print("   " + invoker.undo_last().message)

print("\n6. Full status:")
for line in invoker.execute(GetStatusCommand(manager)).message.splitlines():
    print("   " + line)

print("\n" + "=" * 60)
print("Example complete!")
print("=" * 60)
