"""shopgen generate command - Write the synthetic dataset as CSV files."""

from __future__ import annotations

import click

from shopgen.cli.errors import handle_errors
from shopgen.cli.output import success
from shopgen.config import ShopgenSettings
from shopgen.observability import get_logger


@click.command()
@click.pass_obj
def generate(settings: ShopgenSettings) -> None:
    """Generate customers, categories, products, orders and order lines.

    Writes one CSV file per entity into the data directory
    (`SHOPGEN_DATA_DIR`, default `./data`), using `SHOPGEN_SEED`.

    Examples:

        shopgen generate

        SHOPGEN_SEED=7 shopgen generate
    """
    from shopgen.generators.ecommerce import EcommerceGenerator, generation_now

    log = get_logger(__name__, command="generate")
    with handle_errors("generate"):
        config = settings.generation_config(now=generation_now())
        dataset = EcommerceGenerator(config).generate_dataset()
        paths = dataset.write(settings.data_dir)

    log.info("dataset_generated", seed=config.seed, files=len(paths))
    for (model, records), path in zip(dataset.tables(), paths, strict=True):
        success(f"{model.table_name}: {len(records)} rows -> {path}")
