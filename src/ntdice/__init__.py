"""Non-transitive dice game with commit-reveal fair rolls."""
