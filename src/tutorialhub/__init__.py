"""TutorialHub - static content compiler for tutorial sites."""
