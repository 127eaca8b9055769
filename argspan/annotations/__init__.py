from .factory import from_host_annotation, from_host_annotations, short_type_name
