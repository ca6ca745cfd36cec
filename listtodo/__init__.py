"""list-todo: find shovel-ready tasks in a TEF to-do list."""
