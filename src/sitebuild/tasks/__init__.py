"""Build tasks live here.

Each module declares tasks with `@sitebuild.task(name=...)` or module-level
`alias(...)` specs; the CLI discovers them by importing every module in this
package.
"""
