"""module for the data structures the lint passes operate on."""
