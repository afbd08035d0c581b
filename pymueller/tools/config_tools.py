import yaml


class IndentDumper(yaml.SafeDumper):
    """
    indent block sequences when dumping an optical train to a .yaml config file, so that the output matches the
    hand-written configs in pymueller/model/config/.
    https://stackoverflow.com/questions/25108581/python-yaml-dump-bad-indentation
    """
    def increase_indent(self, flow=False, indentless=False):
        return super(IndentDumper, self).increase_indent(flow, False)
