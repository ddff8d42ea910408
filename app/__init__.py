"""Studio reminders service: HTTP trigger, configuration and logging."""
