from cloudpaste.models.paste_model import PasteModel


__all__ = ['PasteModel']
