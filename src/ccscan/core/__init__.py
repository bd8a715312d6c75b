"""Core building blocks for the Code Coverage build step."""
