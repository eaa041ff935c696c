# runegather/core/events.py
"""
Names of the events published on the EventSystem by the gathering core.

Every event carries a dict payload; the keys are listed next to each name.
"""

# GatherTimer
GATHER_STARTED = "gather_started"          # resource
GATHER_PROGRESS = "gather_progress"        # resource, progress
GATHER_COMPLETED = "gather_completed"      # resource, result
GATHER_FAILED = "gather_failed"            # resource, result
GATHER_STOPPED = "gather_stopped"          # resource, progress

# Selection (manual or auto)
ELEMENT_REVEALED = "element_revealed"      # resource, element_id, index
SELECTION_CHANGED = "selection_changed"    # resource, selected_elements

# AutoGatherScheduler
AUTO_GATHER_STARTED = "auto_gather_started"                      # order
AUTO_GATHER_STOPPED = "auto_gather_stopped"                      # total_gathered, stats
AUTO_GATHER_RESOURCE_GATHERED = "auto_gather_resource_gathered"  # resource, stats
AUTO_GATHER_CYCLE_COMPLETED = "auto_gather_cycle_completed"      # cycles_completed, stats
AUTO_GATHER_MEMBERSHIP_CHANGED = "auto_gather_membership_changed"  # resource_id, selected, members

# Rejected operations and other user-facing notices
NOTICE = "notice"                          # message, level
