# probenotify

Send monitoring results to chat, e-mail, SMS, log and shell channels.

Each notifier is set up from the same base settings: a name, a list of channels, a
dry-run switch, a timeout and a retry policy. When a send fails, it is retried as the
retry policy says. In dry-run mode nothing is sent and the message is only logged.

## Install

```sh
pip install probenotify
```

For the test suite:

```sh
pip install "probenotify[test]"
pytest
```

## Notifiers

| Module | Class | Sends to |
| --- | --- | --- |
| `probenotify.slack` | `SlackNotify` | Slack incoming webhook |
| `probenotify.lark` | `LarkNotify` | Lark robot webhook |
| `probenotify.dingtalk` | `DingtalkNotify` | DingTalk robot webhook, signed if a secret is set |
| `probenotify.wecom` | `WecomNotify` | WeCom robot webhook |
| `probenotify.teams` | `TeamsNotify` | Microsoft Teams webhook |
| `probenotify.telegram` | `TelegramNotify` | Telegram bot API |
| `probenotify.ringcentral` | `RingCentralNotify` | RingCentral webhook |
| `probenotify.email` | `EmailNotify` | SMTP over TLS |
| `probenotify.sms` | `SmsNotify` | Yunpian, Twilio or Nexmo |
| `probenotify.lognotify` | `LogNotify` | a log file, or local or remote syslog |
| `probenotify.shell` | `ShellNotify` | a command, with the result passed in environment variables |

## Example

```python
from probenotify.base import NotifySettings
from probenotify.slack import SlackNotify

slack = SlackNotify(name="ops", webhook_url="https://hooks.example.com/services/placeholder")
slack.config(NotifySettings())
slack.send_with_retry("Service Down", '{"text": "api is down"}', "Notification")
```

Any channel can be switched to dry-run, which only logs the message:

```python
slack.dry = True
slack.notify("Service Down", "api is down")
```

## Configuration

`probenotify.notify.NotifyConfig.from_dict` reads a mapping, for example one loaded
from YAML, with one list per kind of notifier: `log`, `email`, `slack`, `telegram`,
`wecom`, `dingtalk`, `lark`, `sms`, `teams`, `shell` and `ringcentral`.
`all_notifiers()` returns every notifier that was read, ready to be configured.

```python
import yaml
from probenotify.base import NotifySettings
from probenotify.notify import NotifyConfig

with open("notify.yaml") as fh:
    config = NotifyConfig.from_dict(yaml.safe_load(fh))

for notifier in config.all_notifiers():
    notifier.config(NotifySettings())
```

The SMS provider is given by name: `yunpian`, `twilio` or `nexmo`. Any other name
leaves the provider unknown, and sending then fails.