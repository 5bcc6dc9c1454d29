# Core module for sourcesecure
