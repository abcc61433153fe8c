"""
File names, defaults and marker tokens shared by the loader, the head and the CLI.

Label tables are not defined here; they come from each checkpoint's id2label.
"""

# Token string the tokenizer appends after the real content; everything after it is padding.
SEP_TOKEN = "[SEP]"

BILOU_OUTSIDE = "O"

DEFAULT_MODEL_ID = "KoichiYasuoka/bert-base-vietnamese-upos"
DEFAULT_REVISION = "main"
DEFAULT_PROMPT = "Hai cái đầu thì tốt hơn một."

CONFIG_FILENAME = "config.json"
TOKENIZER_FILENAME = "tokenizer.json"
PTH_WEIGHTS_FILENAME = "pytorch_model.bin"
SAFETENSORS_WEIGHTS_FILENAME = "model.safetensors"
