import make_sig
import stripe


def test_prints_verifiable_header(capsys):
    payload = '{"id":"evt_1","type":"payment_intent.succeeded","livemode":false}'

    assert make_sig.main(["make_sig.py", "whsec_test", payload]) == 0

    header = capsys.readouterr().out.strip()
    assert stripe.WebhookSignature.verify_header(payload, header, "whsec_test")


def test_rejects_invalid_json(capsys):
    assert make_sig.main(["make_sig.py", "whsec_test", "{nope"]) == 1
    assert "valid JSON" in capsys.readouterr().err


def test_usage(capsys):
    assert make_sig.main(["make_sig.py"]) == 1
    assert "Usage" in capsys.readouterr().err
