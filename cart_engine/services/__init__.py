# Cart services: pricing, reducer, analytics, facade and sessions
