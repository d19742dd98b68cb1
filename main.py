class Reporter:
    _metrics = {}

    @classmethod
    def report(cls, metricname, metricdescription=None, value=None):
        if isinstance(metricname, list):
            return [cls._metrics.get(name) for name in metricname]
        if value is not None:
            cls._metrics[metricname] = value
            return value
        return cls._metrics.get(metricname)


class Application:
    def run(self):
        from keytok.core import EncodingMethod
        from keytok.pipeline import TokenizationPipeline

        payload = {
            'customer_name': 'Alice',
            'customer_age': 30,
            'shipping_address': {'city': 'Paris', 'postal_code': '75001'},
            'orders': [
                {'order_id': 1, 'total_amount': 12.5},
                {'order_id': 2, 'total_amount': 7.0},
            ],
        }
        pipeline = TokenizationPipeline(
            infer_keys=True, reporter=Reporter, method=EncodingMethod.BASE64
        )
        stream = pipeline.encode_bytes(payload)
        restored = pipeline.decode_bytes(stream)
        print('Dictionary:', dict(pipeline.dictionary.forward))
        print('Encoded:', stream.decode('utf-8'))
        print('Roundtrip ok:', restored == payload)
        print('Metrics:', Reporter.report(['dictionary_size', 'encoded_bytes', 'compression_ratio']))


if __name__ == '__main__':
    Application().run()
