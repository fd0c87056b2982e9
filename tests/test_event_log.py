from keybatch.event_log import EventLog


def test_log_event_echoes(capsys):
    EventLog().log_event('Created github and github.pub', level='OK')
    assert 'Created github and github.pub' in capsys.readouterr().out


def test_warning_prefix(capsys):
    EventLog()('Skipping generation.', 'WARN')
    assert 'Warn: Skipping generation.' in capsys.readouterr().out


def test_log_event_writes_file(tmp_path):
    log_file = tmp_path / 'keybatch.log'
    log = EventLog(log_file)

    log.log_event('Processing key: github')
    log.log_event('Could not generate key', level='WARN')

    content = log_file.read_text()
    assert 'INFO: Processing key: github' in content
    assert 'WARN: Could not generate key' in content


def test_log_file_failure_does_not_raise(tmp_path, capsys):
    log = EventLog(tmp_path / 'missing-dir' / 'keybatch.log')
    log.log_event('still printed')
    captured = capsys.readouterr()
    assert 'still printed' in captured.out
    assert 'Failed to log event' in captured.err
