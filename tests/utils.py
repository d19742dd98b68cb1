import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parent.parent))

import main
from keytok.dictionary import generate_dictionary
from keytok.tokenizer import tokenize, detokenize


def roundtrip(value, keys, **options):
    dictionary = generate_dictionary(keys, reporter=main.Reporter, **options)
    try:
        encoded = tokenize(value, dictionary.forward, reporter=main.Reporter)
        result = detokenize(encoded, dictionary.reverse, reporter=main.Reporter)
        if result != value:
            count = main.Reporter.report('roundtrip_failures') or 0
            main.Reporter.report(
                'roundtrip_failures', 'Number of failed roundtrip comparisons', count + 1
            )
        return result
    except Exception:
        count = main.Reporter.report('roundtrip_failures') or 0
        main.Reporter.report(
            'roundtrip_failures', 'Number of failed roundtrip comparisons', count + 1
        )
        raise
