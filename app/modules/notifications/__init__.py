"""Notification pipeline.

Consumes domain events from the priority consumer groups, records
notifications, dispatches emails, and escalates messages that cannot be
processed to the dead letter topic.
"""
