"""Session-scoped screenshot, accessibility and SEO audit engine."""
