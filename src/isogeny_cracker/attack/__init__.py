"""Protocol driver, parameter search and the attack orchestrator."""
