"""runlog: weekly activity log reporting service."""
