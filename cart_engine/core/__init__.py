# Core configuration and errors
