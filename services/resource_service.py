# services/resource_service.py
from config import CACHE_BUST_PARAM, VALUE_PLACEHOLDER
from services.formatter_service import AttributeFormatter


def with_cache_bust(url, version):
    """Appends the version query parameter so identical URLs still reload."""
    if not url:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{CACHE_BUST_PARAM}={version}"


class ResourceResolver:
    """
    Picks the effective resource path for an image or web widget and owns the
    cache-busting version counter. The counter only ever increases.
    """

    def __init__(self, formatter=None):
        self._formatter = formatter or AttributeFormatter()
        self.version = 0

    def bump(self):
        self.version += 1
        return self.version

    def path_from_attribute(self, config, cached_assets):
        ref = config.resource_url_attribute_ref
        if ref is None or not cached_assets:
            return None
        asset = next((a for a in cached_assets if a.id == ref.asset_id), None)
        if asset is None:
            return None
        attribute = asset.get_attribute(ref.attribute_name)
        if attribute is None:
            return None
        descriptor = self._formatter.describe(asset, ref.attribute_name, attribute)
        value = self._formatter.format(attribute, descriptor, asset.type, True, VALUE_PLACEHOLDER)
        if not value or value == VALUE_PLACEHOLDER:
            return None
        return value

    def raw_path(self, config, cached_assets):
        attribute_path = self.path_from_attribute(config, cached_assets)
        return attribute_path if attribute_path is not None else config.resource_path

    def resolve(self, config, cached_assets):
        """Returns the path to load, or None when there is nothing to show."""
        path = self.raw_path(config, cached_assets)
        if not path:
            return None
        return with_cache_bust(path, self.version)

    def note_config_change(self, previous, current):
        """Bumps the version when the static path was edited with no attribute override active."""
        if previous is None:
            return False
        if previous.resource_path == current.resource_path:
            return False
        if current.resource_url_attribute_ref is not None:
            return False
        self.bump()
        return True
