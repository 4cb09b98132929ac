"""
Script: publish_tools package
What: Holds Python workflow helpers for the container build-and-push job.
Doing: Groups CLI entrypoints and shared utility code in one importable package.
Why: Keeps tag, version and deploy logic readable and testable instead of inline in workflow YAML.
Goal: Provide a clear, maintainable home for image versioning, publishing and deployment logic.
"""
