"""Infrastructure: database sessions, SQL repositories, Anthropic client, logging."""
