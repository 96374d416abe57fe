"""Domain core: exceptions, locale rules and the job execution loop."""
