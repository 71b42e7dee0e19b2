"""Controller process: logon, scheduling, call orchestration and reporting."""
