"""HomeHelper - recurring household chores with completion tracking."""
