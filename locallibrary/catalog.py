"""
Routing table of the catalog: the statistics page plus the CRUD rules
each entity resource registers under ``/catalog``.
"""

import logging

from flask import Blueprint, render_template

from .derived import CATALOG_PREFIX
from .resources import RESOURCES
from .stats import library_counts

logger = logging.getLogger(__name__)

bp = Blueprint('catalog', __name__, url_prefix=CATALOG_PREFIX)


@bp.route('')
def index():
    counts = library_counts()
    logger.info("Library statistics: %s", counts)
    return render_template('index.html', title="Local Library Home", **counts)


for resource in RESOURCES:
    resource.register(bp)
