"""Job application tracker with a points, ranks, streaks and milestones engine."""
