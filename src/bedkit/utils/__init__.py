from bedkit.utils.resources import RESOURCES, Resources
