"""Leave Desk: employee roster and leave request services atop a key-value store."""
