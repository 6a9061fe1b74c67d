"""Jekyll site generation.

`shell:jekyll` empties the output directory and runs the generator into it;
`jekyll-build` chains it with the stylesheet and asset tasks.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from ..config import SiteConfig
from ..core import alias, task
from ..errors import SiteGenerateError
from ..logging import get_logger


def clean_output_dir(output_dir: Path, keep_hidden: bool = True) -> int:
    """Remove the contents of `output_dir`, keeping the directory itself.

    Dot-entries such as `.git` survive when `keep_hidden` is set, like a shell
    `rm -rf dir/*`. Returns the number of entries removed.
    """
    if not output_dir.exists():
        output_dir.mkdir(parents=True)
        return 0
    removed = 0
    for entry in output_dir.iterdir():
        if keep_hidden and entry.name.startswith("."):
            continue
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        removed += 1
    return removed


@task(name="shell:jekyll")
def jekyll(config: SiteConfig) -> None:
    """Empty the output directory and run `jekyll build` into it."""
    logger = get_logger("sitebuild.tasks.shell:jekyll")
    removed = clean_output_dir(config.output_dir, config.keep_hidden)
    logger.info("Cleared %d entries from %s", removed, config.output_dir)

    cmd = [*config.generator, "-d", str(config.output_dir)]
    logger.info("Running: %s", " ".join(cmd))
    try:
        # Output goes straight to the console
        proc = subprocess.run(cmd, cwd=config.root)
    except FileNotFoundError as e:
        raise SiteGenerateError(f"Site generator not found: {config.generator[0]}") from e
    if proc.returncode != 0:
        raise SiteGenerateError(f"{' '.join(config.generator)} exited with status {proc.returncode}")


jekyll_build = alias(
    "jekyll-build",
    ["shell:jekyll", "less-build", "assets-copy"],
    description="Regenerate the site, then rebuild stylesheets and copy assets.",
)
